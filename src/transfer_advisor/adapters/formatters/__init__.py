"""Display formatters."""

from transfer_advisor.adapters.formatters.transfer_option_formatter import (
    TransferOptionFormatter,
)

__all__ = ["TransferOptionFormatter"]
