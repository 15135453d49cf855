"""Windows: elevate a batch script with ``Start-Process -Verb runAs``.

Two scripts are staged: ``command.bat`` (cwd, env, command) and
``execute.bat`` which calls it with stdout, stderr and ``%ERRORLEVEL%``
redirected into files. PowerShell returns as soon as the elevated process
starts, so completion is detected by polling the status file.
"""

from __future__ import annotations

import logging
import threading

from elevx.channel import read_result_triad
from elevx.errors import HostPreconditionError, PermissionDeniedError
from elevx.exec import ExecResult
from elevx.materialize import (
    BATCH_LINE_SEP,
    quote_powershell_literal,
    render_batch_script,
    render_execute_script,
)
from elevx.platforms.base import ElevationStrategy
from elevx.poller import wait_for_status
from elevx.types import ElevationRequest, ElevationResult, WindowsContext

logger = logging.getLogger(__name__)


def build_elevate_argv(context: WindowsContext) -> list[str]:
    """PowerShell invocation that launches execute.bat elevated and hidden."""
    return [
        "powershell.exe",
        "Start-Process",
        "-FilePath",
        quote_powershell_literal(str(context.execute_path)),
        "-WindowStyle",
        "hidden",
        "-Verb",
        "runAs",
    ]


class WindowsStrategy(ElevationStrategy):
    platform = "win32"

    def prepare(self, request: ElevationRequest) -> WindowsContext:
        temp = self.require_temp_dir()
        context = WindowsContext(identity=self.new_identity(request), temp_dir=temp)
        if '"' in str(context.root):
            # Reserved on Windows, but the scripts quote paths with it.
            raise HostPreconditionError("Context path cannot contain double-quotes.")
        self.host.make_dir(context.root)
        return context

    def stage(self, request: ElevationRequest, context: WindowsContext) -> None:
        execute = render_execute_script(
            context.command_path,
            context.stdout_path,
            context.stderr_path,
            context.status_path,
        )
        self.host.write_text(context.execute_path, execute)
        context.mark("execute")

        command = render_batch_script(request.command, request.env, self.host.cwd())
        self.host.write_text(context.command_path, command)
        context.mark("command")

    def invoke(self, request: ElevationRequest, context: WindowsContext) -> ExecResult:
        # Error text is localized, so every failure here is treated as a
        # refusal. stdin is closed or PowerShell waits forever on Windows 7.
        try:
            result = self.host.run(
                build_elevate_argv(context),
                close_stdin=True,
                max_output=self.config.max_output_bytes,
            )
        except OSError as exc:
            raise PermissionDeniedError(cause=exc) from exc
        if not result.ok:
            raise PermissionDeniedError(cause=result)
        return result

    def recover_result(
        self,
        request: ElevationRequest,
        context: WindowsContext,
        invocation: ExecResult,
        *,
        cancel: threading.Event | None = None,
    ) -> ElevationResult:
        wait_for_status(
            self.host,
            context,
            interval=self.config.poll_interval,
            min_bytes=self.config.status_min_bytes,
            cancel=cancel,
        )
        return read_result_triad(
            self.host,
            status_path=context.status_path,
            stdout_path=context.stdout_path,
            stderr_path=context.stderr_path,
            command=request.command,
            platform=self.platform,
            line_sep=BATCH_LINE_SEP,
        )
