"""
Settings repository - Data access layer for Settings model.
Handles all database queries related to settings.
"""
from sqlalchemy.orm import Session
from soft75.models import Settings
from soft75.schemas import SettingsUpdate


class SettingsRepository:
    """Repository for Settings data access"""

    @staticmethod
    def get(db: Session) -> Settings:
        """
        Get settings (creates with defaults if not exists).

        Returns:
            Settings object
        """
        settings = db.query(Settings).first()
        if not settings:
            settings = Settings()
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings_update: SettingsUpdate) -> Settings:
        """
        Update settings.

        Args:
            db: Database session
            settings_update: New values

        Returns:
            Updated settings
        """
        settings = SettingsRepository.get(db)
        for key, value in settings_update.model_dump(exclude_unset=True).items():
            setattr(settings, key, value)
        db.commit()
        db.refresh(settings)
        return settings
