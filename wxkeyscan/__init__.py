"""Find SQLCipher keys for local WeChat databases in Linux process memory."""

__version__ = "0.1.10"
__all__ = ["linux", "pattern", "salts", "scanner"]