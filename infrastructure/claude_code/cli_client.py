"""
Claude Code CLI Client

Runs Claude Code as a subprocess in print mode with JSON output and waits
for the final result:
- Command construction from a SessionConfig
- Timeout and process-exit handling
- Parsing of the JSON result document (single object or verbose event list)
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

from domain.services.claude_code_service import (
    ClaudeCodeClientError,
    ClaudeCodeResult,
    IClaudeCodeClient,
    ModelUsageDetail,
    OutputFormat,
    SessionConfig,
)
from shared.constants import CLAUDE_DEFAULT_TIMEOUT_SECONDS, CLAUDE_STDERR_TAIL_CHARS

logger = logging.getLogger(__name__)


def describe_exit_code(returncode: int) -> str:
    """Human readable reason for a non-zero exit"""
    if returncode == 143:  # SIGTERM
        return "Process was terminated (SIGTERM)"
    if returncode == 137:  # SIGKILL
        return "Process was killed (SIGKILL - possibly OOM)"
    if returncode < 0:
        return f"Process killed by signal {-returncode}"
    return f"Process exited with code {returncode}"


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


class ClaudeCodeCLIClient(IClaudeCodeClient):
    """
    Claude Code backend over the `claude` CLI.

    Each launch_and_wait call starts one process and blocks (asynchronously)
    until it exits or the timeout expires.
    """

    def __init__(
        self,
        claude_path: str = "claude",
        timeout_seconds: int = CLAUDE_DEFAULT_TIMEOUT_SECONDS,
    ):
        self.claude_path = claude_path
        self.timeout_seconds = timeout_seconds

    async def check_installed(self) -> tuple[bool, str]:
        """Check if Claude Code CLI is installed and accessible"""
        try:
            proc = await asyncio.create_subprocess_exec(
                self.claude_path, "--version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            stdout, stderr = await proc.communicate()
            if proc.returncode == 0:
                version = stdout.decode().strip()
                return True, f"Claude Code: {version}"
            else:
                return False, f"Claude Code error: {stderr.decode()}"
        except FileNotFoundError:
            return False, "Claude Code CLI not found. Install with: npm install -g @anthropic-ai/claude-code"
        except OSError as e:
            return False, f"Error checking Claude Code: {e}"

    def build_command(self, config: SessionConfig) -> list[str]:
        """Build the CLI argument list for a session"""
        output_format = config.output_format or OutputFormat.JSON
        cmd = [
            self.claude_path,
            "--print", config.query,
            "--output-format", output_format.value,
            "--model", config.model.value,
            "--max-turns", str(config.max_turns),
        ]

        if config.custom_instructions:
            cmd.extend(["--append-system-prompt", config.custom_instructions])

        if config.session_id:
            cmd.extend(["--resume", config.session_id])
            if config.fork_session:
                cmd.append("--fork-session")

        if config.allowed_tools:
            cmd.extend(["--allowedTools", ",".join(config.allowed_tools)])
        if config.disallowed_tools:
            cmd.extend(["--disallowedTools", ",".join(config.disallowed_tools)])

        if config.verbose:
            cmd.append("--verbose")

        return cmd

    async def launch_and_wait(self, config: SessionConfig) -> ClaudeCodeResult:
        cmd = self.build_command(config)
        logger.info(f"Starting Claude Code: model={config.model.value} max_turns={config.max_turns}")
        logger.info(f"Working dir: {config.working_dir}")
        logger.debug(f"Full command: {' '.join(cmd)}")

        env = os.environ.copy()
        env["TERM"] = "dumb"  # Simple terminal
        env["NO_COLOR"] = "1"  # Disable colors

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
                cwd=config.working_dir,
                env=env,
            )
        except FileNotFoundError as e:
            raise ClaudeCodeClientError(
                f"Claude Code CLI not found at '{self.claude_path}' "
                f"(or working dir '{config.working_dir}' does not exist)"
            ) from e
        except OSError as e:
            raise ClaudeCodeClientError(f"failed to start Claude Code: {e}") from e

        logger.info(f"Process started with PID: {process.pid}")

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(f"Claude Code timeout after {self.timeout_seconds}s, killing PID {process.pid}")
            process.kill()
            await process.wait()
            raise ClaudeCodeClientError(f"Claude Code timed out after {self.timeout_seconds}s")
        except asyncio.CancelledError:
            if process.returncode is None:
                logger.warning(f"Claude Code cancelled, killing PID {process.pid}")
                process.kill()
                await process.wait()
            raise

        stdout_str = stdout.decode("utf-8", errors="replace").strip()
        stderr_str = stderr.decode("utf-8", errors="replace").strip()
        if stderr_str:
            logger.warning(f"STDERR: {stderr_str[:500]}")

        logger.info(
            f"Process finished, returncode={process.returncode}, "
            f"stdout_bytes={len(stdout)}"
        )

        payload = self.parse_output(stdout_str)
        if payload is None:
            if process.returncode != 0:
                reason = describe_exit_code(process.returncode)
                detail = stderr_str[-CLAUDE_STDERR_TAIL_CHARS:] or stdout_str[-CLAUDE_STDERR_TAIL_CHARS:]
                raise ClaudeCodeClientError(f"{reason}: {detail}" if detail else reason)
            raise ClaudeCodeClientError(
                f"could not parse Claude Code output: {stdout_str[:200] or '<empty>'}"
            )

        result = self.parse_result(payload)
        if process.returncode != 0 and not result.error:
            result.is_error = True
            result.error = describe_exit_code(process.returncode)
        return result

    @staticmethod
    def parse_output(output: str) -> Optional[dict]:
        """
        Extract the result document from CLI output.

        `--output-format json` prints one object; with `--verbose` it prints
        an array of every event, whose last "result" entry is the one we want.
        """
        if not output:
            return None
        try:
            data = json.loads(output)
        except json.JSONDecodeError:
            # Fall back to the last JSON line (stray log lines before the result)
            for line in reversed(output.splitlines()):
                line = line.strip()
                if not line.startswith("{"):
                    continue
                try:
                    data = json.loads(line)
                    break
                except json.JSONDecodeError:
                    continue
            else:
                return None

        if isinstance(data, list):
            results = [e for e in data if isinstance(e, dict) and e.get("type") == "result"]
            return results[-1] if results else None
        if isinstance(data, dict):
            return data
        return None

    @staticmethod
    def parse_result(payload: dict) -> ClaudeCodeResult:
        """Map the CLI result document onto ClaudeCodeResult"""
        is_error = bool(payload.get("is_error", False))
        subtype = payload.get("subtype") or ""

        error = payload.get("error")
        if not error and is_error and subtype.startswith("error"):
            error = subtype

        cost = payload.get("total_cost_usd")
        if cost is None:
            cost = payload.get("cost_usd")

        model_usage = {}
        for model_name, usage in (payload.get("modelUsage") or {}).items():
            usage = usage if isinstance(usage, dict) else {}
            model_usage[model_name] = ModelUsageDetail(
                input_tokens=_as_int(usage.get("inputTokens")),
                output_tokens=_as_int(usage.get("outputTokens")),
                cache_read_input_tokens=_as_int(usage.get("cacheReadInputTokens")),
                cache_creation_input_tokens=_as_int(usage.get("cacheCreationInputTokens")),
                cost_usd=_as_float(usage.get("costUSD")),
            )

        return ClaudeCodeResult(
            result=payload.get("result") or "",
            session_id=payload.get("session_id") or "",
            cost_usd=_as_float(cost),
            duration_ms=_as_int(payload.get("duration_ms")),
            num_turns=_as_int(payload.get("num_turns")),
            is_error=is_error,
            error=str(error) if error else None,
            model_usage=model_usage,
        )
