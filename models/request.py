from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus



@dataclass(frozen=True)
class Request:
    method: str
    path: str
    version: str = 'HTTP/1.1'
    headers: dict[str, str] = field(default_factory=dict)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    @property
    def is_upgrade(self) -> bool:
        """True when the client asks to switch protocols on this connection."""
        connection = self.header('connection', '')
        tokens = [token.strip().lower() for token in connection.split(',')]
        return 'upgrade' in tokens and self.header('upgrade') is not None


class TargetKind(Enum):
    FILE = 'file'
    DIRECTORY_INDEX_CANDIDATE = 'directory_index_candidate'
    DIRECTORY = 'directory'


@dataclass(frozen=True)
class ResolvedTarget:
    kind: TargetKind
    filesystem_path: str
    content_type: str | None = None

    @property
    def is_supported(self) -> bool:
        return self.kind != TargetKind.FILE or self.content_type is not None


@dataclass
class Response:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b''
    # Filesystem path the response was produced from, used by the request logger
    served_path: str | None = None

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ''

    def to_dict(self):
        return {
            "status": self.status,
            "headers": self.headers,
            "body_length": len(self.body),
            "served_path": self.served_path,
        }
