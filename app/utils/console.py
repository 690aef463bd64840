"""Pretty console output for the tag resolver CLI.

Usage:
    from utils.console import console
    console.start("Tag Resolver", "3 terms to resolve")
    console.resolution("quero comer sushi", "Resolved", "tag 4 'Japonês' (created)")
    console.pipeline_finished(success=True)

Design principles:
- Isolated from logging (file logs are separate)
- Only running per-run counts are kept between calls
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass
class ConsoleConfig:
    """Configuration for console output behavior."""
    max_term_length: int = 40
    box_width: int = 60

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Load configuration from environment variables."""
        return cls(
            max_term_length=int(os.getenv("CONSOLE_MAX_TERM_LEN", "40")),
        )


class Console:
    """Pretty console output handler for resolver runs.

    All output goes to stdout and is designed to be human-readable.
    For machine-readable logs, use the logging module instead.
    """

    def __init__(self, config: Optional[ConsoleConfig] = None):
        self.config = config or ConsoleConfig.from_env()
        self._counts = {"resolved": 0, "not_found": 0, "failed": 0}

    # ==================== Helpers ====================

    def _truncate(self, text: str, max_len: int) -> str:
        """Truncate text with ellipsis if too long."""
        if len(text) <= max_len:
            return text
        return text[: max_len - 3] + "..."

    def _print(self, *args, **kwargs) -> None:
        """Print to stdout with flush."""
        print(*args, **kwargs, flush=True)

    # ==================== Phase Indicators ====================

    def start(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n🚀 {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def success(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n✅ {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def error(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n❌ {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def warning(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n⚠️  {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def info(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n📋 {message}")
        if detail:
            self._print(f"   └─ {detail}")

    # ==================== Resolution ====================

    def resolution_start(self, total_terms: int) -> None:
        """Display resolution start info and reset the running counts."""
        self._print(f"\n🤖 Resolving {total_terms} term(s)")
        self._counts = {"resolved": 0, "not_found": 0, "failed": 0}

    def resolution(self, term: str, status: str, detail: str, elapsed: Optional[float] = None) -> None:
        """One line per resolved term: icon, term, outcome."""
        icons = {"Resolved": "🍽️ ", "Not found": "🤷", "Failed": "❌"}
        key = {"Resolved": "resolved", "Not found": "not_found"}.get(status, "failed")
        self._counts[key] += 1
        shown = self._truncate(term, self.config.max_term_length)
        time_str = f" ({elapsed:.1f}s)" if elapsed is not None else ""
        self._print(f"{icons.get(status, '•')} {shown:<{self.config.max_term_length}} → {detail}{time_str}")

    def tag_table(self, rows: Sequence[Tuple[int, str]]) -> None:
        """List tags as id/name rows."""
        self._print(f"\n🏷️  Tags ({len(rows)})")
        if not rows:
            self._print("   └─ (none)")
            return
        for i, (tag_id, name) in enumerate(rows):
            branch = "└─" if i == len(rows) - 1 else "├─"
            self._print(f"   {branch} {tag_id:>4}  {name}")

    def summary(self) -> None:
        c = self._counts
        total = sum(c.values())
        self._print(f"\n{'─' * self.config.box_width}")
        self._print(
            f"📊 {total} terms: {c['resolved']} resolved, "
            f"{c['not_found']} not food, {c['failed']} failed"
        )

    # ==================== Completion ====================

    def pipeline_finished(self, success: bool = True) -> None:
        if success:
            self._print("\n🏁 Done.\n")
        else:
            self._print("\n💥 Finished with errors.\n")

    def interrupted(self) -> None:
        self._print("\n\n⛔ Interrupted by user.\n")


console = Console()

__all__ = ["console", "Console", "ConsoleConfig"]
