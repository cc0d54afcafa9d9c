"""
Widget data export.
Writes the latest snapshot as the flat JSON file read by the home screen widget.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from soft75.constants import WIDGET_DATA_PATH, TASK_LABELS
from soft75.domain import ChallengeSnapshot

logger = logging.getLogger("soft75.widget")


class WidgetService:
    """Service for widget snapshot files"""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or WIDGET_DATA_PATH)

    def export(self, snapshot: ChallengeSnapshot) -> bool:
        """
        Write snapshot to the widget file.

        The file is replaced atomically so the widget never reads a
        half-written document. Errors are logged, not raised.

        Returns:
            True if the file was written
        """
        data = snapshot.to_dict()
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed writing widget data to {self.path}: {e}")
            return False

        logger.info(
            f"Widget data saved: day={data['currentDay']} streak={data['streakCount']}"
        )
        return True

    def read(self) -> ChallengeSnapshot:
        """Last exported snapshot, or an empty day-0 snapshot"""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return ChallengeSnapshot(
                current_day=int(data["currentDay"]),
                streak_count=int(data["streakCount"]),
                tasks={str(k): bool(v) for k, v in data["tasks"].items()}
            )
        except FileNotFoundError:
            pass
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Unreadable widget data at {self.path}: {e}")

        return ChallengeSnapshot(
            current_day=0,
            streak_count=0,
            tasks={label: False for label in TASK_LABELS.values()}
        )
