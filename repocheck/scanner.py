"""Line-by-line rule scanner over a source tree."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union

from .result import READ_ERROR, RULE_ERROR, ScanError, ScanResult, Violation
from .rules import Rule
from .utils import read_text_lines
from .walker import walk_files

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".ts"
DEFAULT_CONCURRENCY = 16

ViolationCallback = Callable[[Violation], None]


def scan_lines(path: str, lines: Iterable[str], rules: Sequence[Rule]) -> Iterator[Violation]:
    """Yield a violation for every (rule, line) pair where the rule matches."""

    applicable = [rule for rule in rules if rule.applies_to(path)]
    if not applicable:
        return
    for line_number, line in enumerate(lines, start=1):
        for rule in applicable:
            if rule.matches(line):
                yield Violation(rule=rule.name, message=rule.message, path=path, line=line_number)


async def scan_file(
    path: Path,
    rules: Sequence[Rule],
    result: ScanResult,
    on_violation: Optional[ViolationCallback] = None,
) -> None:
    """Scan one file, recording failures on ``result`` instead of raising."""

    file_path = str(path)
    try:
        lines = await asyncio.to_thread(read_text_lines, path)
    except OSError as exc:
        logger.error("unable to read %s: %s", file_path, exc)
        result.add_error(ScanError(path=file_path, kind=READ_ERROR, detail=str(exc)))
        return

    try:
        for violation in scan_lines(file_path, lines, rules):
            result.add_violation(violation)
            if on_violation is not None:
                on_violation(violation)
    except Exception as exc:
        logger.exception("rule evaluation failed for %s", file_path)
        result.add_error(ScanError(path=file_path, kind=RULE_ERROR, detail=str(exc)))


async def scan_tree(
    root: Union[str, Path],
    rules: Sequence[Rule],
    extension: str = DEFAULT_EXTENSION,
    concurrency: int = DEFAULT_CONCURRENCY,
    on_violation: Optional[ViolationCallback] = None,
) -> ScanResult:
    """Walk ``root`` and scan every file ending with ``extension``.

    The directory walk runs in a worker thread and hands each discovered file
    to the event loop through a queue, so every candidate file becomes its own
    task while the walk is still going. The result is returned once the walk
    and all of those tasks have finished. Lines within a file are reported in
    order, files may interleave.
    """

    result = ScanResult(root=str(root))
    semaphore = asyncio.Semaphore(max(1, concurrency))
    loop = asyncio.get_running_loop()
    discovered: asyncio.Queue = asyncio.Queue()

    def _walk() -> None:
        try:
            for path in walk_files(root):
                loop.call_soon_threadsafe(discovered.put_nowait, path)
        finally:
            loop.call_soon_threadsafe(discovered.put_nowait, None)

    async def _bounded(path: Path) -> None:
        async with semaphore:
            await scan_file(path, rules, result, on_violation)

    walking = asyncio.create_task(asyncio.to_thread(_walk))
    pending = set()
    while True:
        path = await discovered.get()
        if path is None:
            break
        result.files_scanned += 1
        if not path.name.endswith(extension):
            continue
        result.files_matched += 1
        logger.debug("queueing %s", path)
        task = asyncio.create_task(_bounded(path))
        pending.add(task)
        task.add_done_callback(pending.discard)

    await walking
    await asyncio.gather(*pending)
    return result


def run_scan(
    root: Union[str, Path],
    rules: Sequence[Rule],
    extension: str = DEFAULT_EXTENSION,
    concurrency: int = DEFAULT_CONCURRENCY,
    on_violation: Optional[ViolationCallback] = None,
) -> ScanResult:
    """Synchronous wrapper around :func:`scan_tree`."""

    return asyncio.run(
        scan_tree(root, rules, extension=extension, concurrency=concurrency, on_violation=on_violation)
    )
