"""
CLI Module

Command groups for the digest CLI, one module per group.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from cli.messages import messages
from cli.report import report
from cli.summaries import summaries


__all__ = ["messages", "report", "summaries"]
