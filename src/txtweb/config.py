"""Process configuration loaded from YAML."""
from __future__ import annotations

import logging

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


class Config:
    """Listener and resolver settings.

    Every setting has a default, so a config file is optional. The YAML
    layout is::

        log_level: INFO
        listen:
          host: ""
          port: 80
          read_header_timeout: 5
        dns:
          nameservers: [1.1.1.1, 8.8.8.8]
          port: 53
          timeout: 5

    Args:
        path: Filesystem path to the YAML configuration, or None.

    Attributes:
        path: Path to the YAML config file, if any.
        host: Bind address; empty for all interfaces.
        port: TCP port for HTTP.
        read_header_timeout: Seconds a client has to send its request head.
        log_level: Logging level name.
        nameservers: Recursive nameservers; empty for the system ones.
        dns_port: Nameserver port.
        dns_timeout: Seconds allowed per nameserver attempt; None keeps the
            resolv.conf setting.
    """

    def __init__(self, path: str | None = None) -> None:
        """Initialize with defaults and load ``path`` if given.

        Args:
            path: Path to YAML file.
        """
        self.path = path
        self.host = ""
        self.port = 80
        self.read_header_timeout = 5.0
        self.log_level = "INFO"
        self.nameservers: list[str] = []
        self.dns_port = 53
        self.dns_timeout: float | None = None
        if path is not None:
            self.load()

    def load(self) -> None:
        """Load settings from the YAML file.

        Raises:
            ValueError: On invalid YAML structure or values.
            FileNotFoundError: If the config file is missing.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML parsing error: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"top level must be a mapping, got {type(data).__name__}")
        listen = self._section(data, "listen")
        dns = self._section(data, "dns")

        try:
            self.host = str(listen.get("host", self.host) or "")
            self.port = int(listen.get("port", self.port))
            self.read_header_timeout = float(listen.get("read_header_timeout", self.read_header_timeout))
            self.dns_port = int(dns.get("port", self.dns_port))
            timeout = dns.get("timeout", self.dns_timeout)
            self.dns_timeout = None if timeout is None else float(timeout)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid setting: {exc}") from exc

        nameservers = dns.get("nameservers", [])
        if isinstance(nameservers, str):
            nameservers = [nameservers]
        if not isinstance(nameservers, list):
            raise ValueError("'dns.nameservers' must be a list")
        self.nameservers = [str(ns).strip() for ns in nameservers if str(ns).strip()]

        log_level = str(data.get("log_level", self.log_level)).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"unsupported log_level '{log_level}'")
        self.log_level = log_level

        if not 0 < self.port < 65536 or not 0 < self.dns_port < 65536:
            raise ValueError("ports must be between 1 and 65535")
        if self.read_header_timeout <= 0 or (self.dns_timeout is not None and self.dns_timeout <= 0):
            raise ValueError("timeouts must be positive")

        logger.info("configuration loaded from %s", self.path)

    @staticmethod
    def _section(data: dict, name: str) -> dict:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"'{name}' must be a mapping, got {type(section).__name__}")
        return section
