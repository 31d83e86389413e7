"""Local transport: run commands and read/write files on this host."""

import asyncio
import logging
import os

logger = logging.getLogger(__name__)


def make_run_cmd(work_dir=None, dry_run=False):
    """Create a run_cmd callable for local execution.

    The callable returns (returncode, stdout, stderr).
    """

    async def run_cmd(command, stream=True, timeout=600, log_output=False):
        if dry_run:
            logger.info(f"[dry-run] {command}")
            return 0, "", ""

        try:
            use_pipe = not stream or log_output
            proc = await asyncio.create_subprocess_shell(
                command,
                cwd=work_dir,
                stdout=asyncio.subprocess.PIPE if use_pipe else None,
                stderr=asyncio.subprocess.PIPE if use_pipe else None,
            )

            if log_output:
                stdout_lines, stderr_lines = [], []

                async def _read_stream(pipe, lines, level):
                    async for raw_line in pipe:
                        line = raw_line.decode().rstrip("\n")
                        logger.log(level, line)
                        lines.append(line)

                await asyncio.wait_for(
                    asyncio.gather(
                        _read_stream(proc.stdout, stdout_lines, logging.INFO),
                        _read_stream(proc.stderr, stderr_lines, logging.INFO),
                        proc.wait(),
                    ),
                    timeout=timeout,
                )
                return proc.returncode, "\n".join(stdout_lines), "\n".join(stderr_lines)
            else:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
                stdout = "" if stream else (stdout_bytes.decode() if stdout_bytes else "")
                stderr = "" if stream else (stderr_bytes.decode() if stderr_bytes else "")
                return proc.returncode, stdout, stderr
        except asyncio.TimeoutError:
            logger.error(f"Command timed out after {timeout}s: {command}")
            proc.kill()
            await proc.wait()
            return 1, "", ""
        except OSError as e:
            logger.error(f"Error running command: {e}")
            return 1, "", str(e)

    return run_cmd


def make_write_file(base_dir="", dry_run=False):
    """Create a write_file callable. Relative paths resolve against base_dir."""

    async def write_file(path, content, mode=None):
        full_path = os.path.join(base_dir, path)
        if dry_run:
            logger.info(f"[dry-run] write {full_path}")
            return
        os.makedirs(os.path.dirname(full_path) or ".", exist_ok=True)
        if mode is None:
            with open(full_path, "w") as f:
                f.write(content)
            return
        # Create with the final mode so secrets are never world-readable on disk
        fd = os.open(full_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(full_path, mode)

    return write_file


def make_read_file(base_dir=""):
    """Create a read_file callable returning file content, or None if absent."""

    async def read_file(path):
        full_path = os.path.join(base_dir, path)
        if not os.path.isfile(full_path):
            return None
        with open(full_path) as f:
            return f.read()

    return read_file
