"""Direct-upload image broker: presigned S3 uploads with tracked metadata."""

__version__ = "1.0.0"
