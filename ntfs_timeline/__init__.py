"""Reconstruction of file operation histories from NTFS $MFT time-stamps."""

__version__ = "1.0.0"
