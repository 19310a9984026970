from fastapi import HTTPException, status


class AgromException(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class AuthenticationRequiredError(AgromException):
    def __init__(self, detail: str = "No autorizado"):
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)


class ProfileMissingError(AgromException):
    def __init__(self, detail: str = "Perfil de usuario no encontrado"):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT)


class NotFoundError(AgromException):
    def __init__(self, resource: str, resource_id: str | None = None):
        detail = f"{resource} no encontrado"
        if resource_id:
            detail = f"{resource} '{resource_id}' no encontrado"
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class PermissionDeniedError(AgromException):
    def __init__(self, detail: str = "No tienes permiso para realizar esta acción"):
        super().__init__(detail=detail, status_code=status.HTTP_403_FORBIDDEN)


class ValidationFailedError(AgromException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


class ExternalServiceError(AgromException):
    def __init__(self, service: str, detail: str | None = None):
        msg = f"Error del servicio externo: {service}"
        if detail:
            msg += f" - {detail}"
        super().__init__(detail=msg, status_code=status.HTTP_502_BAD_GATEWAY)


class ConflictError(AgromException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT)
