"""UI layer -- Rich dashboard and output formatters."""

from .dashboard import (
    console,
    print_final_results,
    print_header,
    print_latency_details,
    print_network_info,
    print_transfer_result,
)
from .output import format_text_result, report_to_json, save_json

__all__ = [
    "console",
    "format_text_result",
    "print_final_results",
    "print_header",
    "print_latency_details",
    "print_network_info",
    "print_transfer_result",
    "report_to_json",
    "save_json",
]
