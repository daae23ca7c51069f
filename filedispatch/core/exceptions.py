from typing import Dict, Optional, Type


class FileDispatchError(Exception):
    """Erreur de base du noyau, porte un message lisible et un type stable"""

    kind = "FileDispatchError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.kind, "detail": self.message}


class ValidationError(FileDispatchError):
    """Entrée mal formée ou incohérente (permutation invalide, profondeur négative...)"""

    kind = "ValidationError"
    status_code = 422


class NotFoundError(FileDispatchError):
    """Référence vers un dossier, une règle, un log ou une entrée d'annulation absente"""

    kind = "NotFound"
    status_code = 404


class ImportPayloadError(FileDispatchError):
    """Échec de normalisation d'un import de règles"""

    status_code = 400


class EmptyPayloadError(ImportPayloadError):
    kind = "EmptyPayload"


class InvalidFormatError(ImportPayloadError):
    kind = "InvalidFormat"


class InvalidShapeError(ImportPayloadError):
    kind = "InvalidShape"


class ConflictError(FileDispatchError):
    """L'état sur disque ne correspond plus à ce qu'attend l'entrée d'annulation"""

    kind = "ConflictError"
    status_code = 409


class TransportError(FileDispatchError):
    """La surface de commandes externe a échoué (réseau, processus, IPC)"""

    kind = "TransportError"
    status_code = 502


ERROR_KINDS: Dict[str, Type[FileDispatchError]] = {
    cls.kind: cls
    for cls in (
        ValidationError,
        NotFoundError,
        EmptyPayloadError,
        InvalidFormatError,
        InvalidShapeError,
        ConflictError,
        TransportError,
    )
}


def error_from_kind(kind: Optional[str], message: str) -> FileDispatchError:
    """Reconstruit l'exception correspondant à un type d'erreur sérialisé"""
    error_cls = ERROR_KINDS.get(kind or "", TransportError)
    return error_cls(message)
