"""
Custom exceptions for the Soft75 challenge tracker.
Exception types raised by the challenge services and mapped to HTTP errors.
"""


class Soft75Exception(Exception):
    """Base exception for the challenge tracker"""
    pass


class NotificationNotFoundException(Soft75Exception):
    """Raised when a notification is not found"""
    def __init__(self, notification_id: int):
        self.notification_id = notification_id
        super().__init__(f"Notification with ID {notification_id} not found")


class InvalidTimeFormatException(Soft75Exception):
    """Raised when time format is invalid"""
    def __init__(self, time_str: str):
        self.time_str = time_str
        super().__init__(f"Invalid time format: {time_str}. Expected HH:MM")


class DeveloperOptionsDisabledException(Soft75Exception):
    """Raised when a debug-only operation is requested outside debug mode"""
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} is only available with developer options enabled")


class DatabaseException(Soft75Exception):
    """Raised when database operations fail"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class ValidationException(Soft75Exception):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
