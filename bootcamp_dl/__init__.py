"""Boot Camp support software fetcher.

Resolves the Apple software-update catalog entry matching a Mac model,
downloads the support package and unpacks the Windows support DMG.
"""

__version__ = "0.1.0"
