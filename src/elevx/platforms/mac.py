"""macOS: run the command through a prebuilt AppleScript prompt bundle.

The bundle's ``applet`` asks for an administrator password, runs
``sudo-prompt-command`` as root and writes ``code``, ``stdout`` and
``stderr`` next to itself. Those three files are the result channel.
"""

from __future__ import annotations

import io
import logging
import plistlib
import stat
import threading
import zipfile
from importlib.resources import files
from pathlib import Path

from elevx.channel import read_result_triad
from elevx.errors import HostPreconditionError, PermissionDeniedError
from elevx.exec import ExecResult
from elevx.host import Host
from elevx.materialize import render_posix_script
from elevx.platforms.base import ElevationStrategy
from elevx.types import ElevationRequest, ElevationResult, MacContext

logger = logging.getLogger(__name__)

APPLET_RESOURCE = "applet.zip"


def applet_bytes() -> bytes:
    """Zip of the bundle's ``Contents`` directory, shipped as package data."""
    return (files("elevx") / "resources" / APPLET_RESOURCE).read_bytes()


def unpack_applet(host: Host, data: bytes, destination: Path) -> int:
    """Extract the bundle into ``destination`` keeping unix permission bits.

    Returns the number of files written.
    """
    written = 0
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            target = destination / info.filename
            if info.is_dir():
                host.make_dirs(target)
                continue
            host.make_dirs(target.parent)
            host.write_bytes(target, archive.read(info))
            mode = stat.S_IMODE(info.external_attr >> 16)
            if mode:
                host.chmod(target, mode)
            written += 1
    return written


def bundle_label(name: str) -> str:
    return f"{name} Password Prompt"


class MacStrategy(ElevationStrategy):
    platform = "darwin"

    def prepare(self, request: ElevationRequest) -> MacContext:
        temp = self.require_temp_dir()
        if not self.host.login_user():
            # The bundle's shell script chowns its output files to $USER.
            raise HostPreconditionError("env['USER'] not defined.")
        context = MacContext(identity=self.new_identity(request), temp_dir=temp, name=request.name)
        self.host.make_dir(context.root)
        return context

    def stage(self, request: ElevationRequest, context: MacContext) -> None:
        count = unpack_applet(self.host, applet_bytes(), context.app_path)
        logger.debug("unpacked %d bundle files into %s", count, context.app_path)
        context.mark("applet")

        if request.icon is not None:
            self.host.write_bytes(context.icon_path, self.host.read_bytes(request.icon))
            context.mark("icon")

        info = plistlib.loads(self.host.read_bytes(context.plist_path))
        info["CFBundleName"] = bundle_label(request.name)
        self.host.write_bytes(context.plist_path, plistlib.dumps(info))
        context.mark("plist")

        # Runs in a subshell of the bundle script, so the cd stays local.
        script = render_posix_script(request.command, request.env, self.host.cwd())
        self.host.write_text(context.command_path, script)
        context.mark("command")

    def invoke(self, request: ElevationRequest, context: MacContext) -> ExecResult:
        # Launched directly with cwd set: the AppleScript finds its sibling
        # shell scripts by relative path, and the app path may contain spaces.
        try:
            result = self.host.run(
                [f"./{context.applet_binary.name}"],
                cwd=context.macos_dir,
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
        context: MacContext,
        invocation: ExecResult,
        *,
        cancel: threading.Event | None = None,
    ) -> ElevationResult:
        return read_result_triad(
            self.host,
            status_path=context.status_path,
            stdout_path=context.stdout_path,
            stderr_path=context.stderr_path,
            command=request.command,
            platform=self.platform,
            missing_is_denied=True,
        )
