"""
Code runner.

Runs user submitted code as a child process:

1. A fresh temporary directory is created for every run and removed
   afterwards, whatever the outcome.
2. Compiled languages are compiled first; a failing compiler produces a
   ``compile_error`` result carrying the compiler's diagnostics.
3. The program runs with the optional input on stdin. A wall-clock timeout
   kills the whole process group and yields a ``timeout`` result. The group
   is killed after a normal exit too, taking background children with it.
4. stdout and stderr are captured up to a byte limit each; anything beyond
   is dropped and the result is flagged ``truncated``.

A semaphore bounds the number of runs in flight. There is no isolation
beyond a private working directory and a process group.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import signal
import tempfile
import time
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from scriptorium.core.errors import ToolchainUnavailableError
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.domain.enums import ExecutionStatus
from scriptorium.core.monitoring import log_code_execution
from scriptorium.server.core.config import ExecutionConfig, settings

from .languages import Language, get_language, prepare_java_source

logger = get_logger(__name__)

_READ_CHUNK = 64 * 1024
# How long to wait for pipes to close once the process group is killed
_SETTLE_SECONDS = 2.0


@dataclass
class ExecutionResult:
    """Outcome of one run."""

    language: str
    status: ExecutionStatus
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    duration_ms: float = 0.0
    truncated: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class _Plan:
    compile_cmd: Optional[List[str]]
    run_cmd: List[str]


@dataclass
class _CappedBuffer:
    """Collects a stream up to ``limit`` bytes and drains the rest."""

    limit: int
    data: bytearray = field(default_factory=bytearray)
    truncated: bool = False

    async def drain(self, stream: Optional[asyncio.StreamReader]) -> None:
        if stream is None:
            return
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                return
            room = self.limit - len(self.data)
            if room > 0:
                self.data.extend(chunk[:room])
            if len(chunk) > room:
                self.truncated = True

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass
class _Outcome:
    returncode: Optional[int]
    stdout: _CappedBuffer
    stderr: _CappedBuffer
    timed_out: bool

    @property
    def truncated(self) -> bool:
        return self.stdout.truncated or self.stderr.truncated


def _kill_process_group(proc: asyncio.subprocess.Process) -> None:
    """SIGKILL the program and anything it started in its session."""
    try:
        if hasattr(os, "killpg"):
            # The group outlives its leader while background children remain
            os.killpg(proc.pid, signal.SIGKILL)
        elif proc.returncode is None:
            proc.kill()
    except (ProcessLookupError, PermissionError):
        # Group already empty
        pass


class CodeRunner:
    """Compiles and runs code snippets in throwaway directories."""

    def __init__(self, config: Optional[ExecutionConfig] = None) -> None:
        self.config = config or settings.execution
        self._semaphore = asyncio.Semaphore(max(1, self.config.max_concurrency))

    def _commands(self, language: Language) -> List[str]:
        cfg = self.config
        return {
            "python": [cfg.python_command],
            "javascript": [cfg.node_command],
            "java": [cfg.javac_command, cfg.java_command],
            "c": [cfg.gcc_command],
            "cpp": [cfg.gpp_command],
        }[language.name]

    def check_toolchain(self, language: Language) -> None:
        """
        Make sure every binary the language needs is installed.

        Raises:
            ToolchainUnavailableError: For the first missing binary
        """
        for command in self._commands(language):
            if shutil.which(command) is None:
                raise ToolchainUnavailableError(command)

    def _plan(self, language: Language, code: str, workdir: Path) -> _Plan:
        cfg = self.config
        if language.name == "java":
            class_name, source = prepare_java_source(code)
            (workdir / f"{class_name}.java").write_text(source, encoding="utf-8")
            return _Plan(
                compile_cmd=[cfg.javac_command, "-encoding", "UTF-8", f"{class_name}.java"],
                run_cmd=[cfg.java_command, "-cp", str(workdir), class_name],
            )

        source_file = workdir / f"main{language.extension}"
        source_file.write_text(code, encoding="utf-8")

        if language.name == "python":
            return _Plan(compile_cmd=None, run_cmd=[cfg.python_command, str(source_file)])
        if language.name == "javascript":
            return _Plan(compile_cmd=None, run_cmd=[cfg.node_command, str(source_file)])

        binary = workdir / "main"
        compiler = cfg.gcc_command if language.name == "c" else cfg.gpp_command
        compile_cmd = [compiler, source_file.name, "-o", binary.name]
        if language.name == "c":
            compile_cmd.append("-lm")
        return _Plan(compile_cmd=compile_cmd, run_cmd=[str(binary)])

    async def _spawn(self, cmd: List[str], workdir: Path, stdin: bytes, timeout: float) -> _Outcome:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(workdir),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError as e:
            raise ToolchainUnavailableError(cmd[0]) from e

        stdout = _CappedBuffer(self.config.max_output_bytes)
        stderr = _CappedBuffer(self.config.max_output_bytes)
        readers = asyncio.gather(stdout.drain(proc.stdout), stderr.drain(proc.stderr))

        async def feed_and_wait() -> int:
            if stdin:
                try:
                    proc.stdin.write(stdin)
                    await proc.stdin.drain()
                except (BrokenPipeError, ConnectionResetError):
                    # Child exited without reading its input
                    pass
            proc.stdin.close()
            return await proc.wait()

        # wait() only returns once the output pipes close, so a background
        # child holding them open runs into the timeout as well
        timed_out = False
        try:
            await asyncio.wait_for(feed_and_wait(), timeout=timeout)
        except asyncio.TimeoutError:
            timed_out = True
        except asyncio.CancelledError:
            _kill_process_group(proc)
            readers.cancel()
            raise

        # Also reaps stragglers after a normal exit
        _kill_process_group(proc)
        try:
            await asyncio.wait_for(asyncio.gather(proc.wait(), readers), timeout=_SETTLE_SECONDS)
        except asyncio.TimeoutError:
            logger.warning(f"Output of {cmd[0]} still open {_SETTLE_SECONDS:g}s after kill; abandoning it")
        return _Outcome(returncode=proc.returncode, stdout=stdout, stderr=stderr, timed_out=timed_out)

    async def run(
        self,
        language: str,
        code: str,
        stdin: Optional[str] = None,
        template_id: Optional[int] = None,
    ) -> ExecutionResult:
        """
        Run a snippet and report how it went.

        Args:
            language: Language name or alias
            code: Source code
            stdin: Text for standard input; a trailing newline is added if missing
            template_id: Code template the code came from, for logging

        Returns:
            The execution result; failures of the program itself are reported
            through ``status`` rather than raised

        Raises:
            UnsupportedLanguageError: If the language is unknown
            ToolchainUnavailableError: If a compiler or interpreter is missing
        """
        lang = get_language(language)
        self.check_toolchain(lang)

        input_bytes = b""
        if stdin:
            input_bytes = (stdin if stdin.endswith("\n") else stdin + "\n").encode("utf-8")

        async with self._semaphore:
            started = time.perf_counter()
            with tempfile.TemporaryDirectory(prefix="scriptorium-", dir=self.config.work_dir) as tmp:
                result = await self._execute(lang, code, input_bytes, Path(tmp))
            result.duration_ms = round((time.perf_counter() - started) * 1000, 2)

        logger.info(
            f"Executed {result.language} code: status={result.status.value}, "
            f"exit_code={result.exit_code}, duration_ms={result.duration_ms}, template_id={template_id}"
        )
        log_code_execution(result.language, result.status.value, result.duration_ms, template_id)
        return result

    async def _execute(self, language: Language, code: str, stdin: bytes, workdir: Path) -> ExecutionResult:
        plan = self._plan(language, code, workdir)

        if plan.compile_cmd is not None:
            logger.debug(f"Compiling {language.name} in {workdir}: {plan.compile_cmd}")
            compiled = await self._spawn(plan.compile_cmd, workdir, b"", self.config.compile_timeout_seconds)
            if compiled.timed_out or compiled.returncode != 0:
                stderr = compiled.stderr.text()
                if compiled.timed_out:
                    stderr += f"\nCompilation timed out after {self.config.compile_timeout_seconds:g} seconds"
                return ExecutionResult(
                    language=language.name,
                    status=ExecutionStatus.compile_error,
                    stdout=compiled.stdout.text(),
                    stderr=stderr.strip(),
                    exit_code=compiled.returncode,
                    truncated=compiled.truncated,
                )

        logger.debug(f"Running {language.name} in {workdir}: {plan.run_cmd}")
        outcome = await self._spawn(plan.run_cmd, workdir, stdin, self.config.timeout_seconds)

        if outcome.timed_out:
            stderr = outcome.stderr.text()
            message = f"Execution timed out after {self.config.timeout_seconds:g} seconds"
            return ExecutionResult(
                language=language.name,
                status=ExecutionStatus.timeout,
                stdout=outcome.stdout.text(),
                stderr=f"{stderr}\n{message}" if stderr else message,
                exit_code=None,
                truncated=outcome.truncated,
            )

        return ExecutionResult(
            language=language.name,
            status=ExecutionStatus.success if outcome.returncode == 0 else ExecutionStatus.runtime_error,
            stdout=outcome.stdout.text(),
            stderr=outcome.stderr.text(),
            exit_code=outcome.returncode,
            truncated=outcome.truncated,
        )


@lru_cache
def get_code_runner() -> CodeRunner:
    """Dependency returning the process-wide code runner."""
    return CodeRunner()
