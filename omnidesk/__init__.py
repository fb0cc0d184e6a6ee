"""OmniDesk - local state and background polling for the OmniTrade desktop companion."""

__version__ = "0.1.0"
