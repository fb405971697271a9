"""emailgate - account registration with expiring email verification links."""

__version__ = "0.1.0"
