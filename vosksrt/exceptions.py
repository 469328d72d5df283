"""Custom Exceptions for the vosksrt application."""

class VoskSrtError(Exception):
    """Base class for exceptions in this package."""
    pass

class ConfigurationError(VoskSrtError):
    """Exception raised for invalid or unreadable configuration."""
    pass

class AudioSourceError(VoskSrtError):
    """Exception raised when an audio source (file decoder or capture device) cannot be opened."""
    pass

class RecognitionError(VoskSrtError):
    """Exception raised when the speech recognition engine cannot be set up or fed."""
    pass

class FormattingError(VoskSrtError):
    """Exception raised for errors during subtitle formatting."""
    pass

class FileSystemError(VoskSrtError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
