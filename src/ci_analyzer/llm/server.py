import subprocess
import time

import httpx
from rich.console import Console

from ci_analyzer.config import Settings
from ci_analyzer.errors import ServerStartupError

console = Console()

HEALTH_PATH = "/health"
HEALTH_ATTEMPTS = 60
HEALTH_INTERVAL = 1.0
PROBE_TIMEOUT = 2.0
STOP_TIMEOUT = 10.0


class LlamaServer:
    """A llama.cpp server running in the background for the lifetime of a `with` block."""

    def __init__(
        self,
        settings: Settings,
        health_transport: httpx.BaseTransport | None = None,
        popen=subprocess.Popen,
        sleep=time.sleep,
    ):
        self.settings = settings
        self.process: subprocess.Popen | None = None
        self._popen = popen
        self._sleep = sleep
        self._http = httpx.Client(
            base_url=settings.llama_url,
            timeout=PROBE_TIMEOUT,
            transport=health_transport,
        )

    def command(self) -> list[str]:
        return [
            self.settings.llama_server_bin,
            "--model", self.settings.model_path,
            "--port", str(self.settings.llama_port),
            "--ctx-size", str(self.settings.context_size),
            "--threads", str(self.settings.llama_threads),
            "--log-disable",
        ]

    def start(self):
        if self.process is not None:
            return

        console.print("[blue]Starting llama.cpp server...[/blue]")
        try:
            # stdout belongs to the ISSUE_TITLE/ISSUE_BODY block
            self.process = self._popen(self.command(), stdout=subprocess.DEVNULL)
        except OSError as e:
            raise ServerStartupError(
                f"Cannot launch {self.settings.llama_server_bin}: {e}"
            ) from e

    def is_ready(self) -> bool:
        try:
            response = self._http.get(HEALTH_PATH)
        except httpx.HTTPError:
            return False
        return response.is_success

    def wait_ready(self, attempts: int = HEALTH_ATTEMPTS, interval: float = HEALTH_INTERVAL):
        for attempt in range(1, attempts + 1):
            if self.process is not None and self.process.poll() is not None:
                raise ServerStartupError(
                    f"llama.cpp server exited with code {self.process.returncode} before becoming ready"
                )
            if self.is_ready():
                console.print("[green]llama.cpp server ready.[/green]")
                return
            if attempt < attempts:
                self._sleep(interval)

        raise ServerStartupError(
            f"llama.cpp server failed to start (no healthy response after {attempts} attempts)"
        )

    def stop(self):
        """Terminate and reap the server. Safe to call repeatedly or before start()."""
        if self.process is None:
            return

        process, self.process = self.process, None
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()

    def __enter__(self) -> "LlamaServer":
        try:
            self.start()
            self.wait_ready()
        except BaseException:
            self.stop()
            self._http.close()
            raise
        return self

    def __exit__(self, *exc_info):
        self.stop()
        self._http.close()
