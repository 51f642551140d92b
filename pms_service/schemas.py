"""Modelos Pydantic (schemas) para validación de datos de entrada/salida."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

# --- Schemas de Usuario ---

class UserCreate(BaseModel):
    """Datos requeridos para registrar un usuario."""
    username: str
    email: str
    password: str


class UserLogin(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    """Cualquier subconjunto de campos del perfil; lo omitido conserva su valor."""
    username: Optional[str] = None
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    """Datos devueltos tras registro o login (excluye contraseña)."""
    id: str
    username: str
    email: str
    token: str

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(AuthResponse):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# --- Schemas de Pago ---

class PaymentRequest(BaseModel):
    """
    Datos de tarjeta recibidos en /api/payment. Nunca se persisten.
    Los campos son opcionales aquí para responder 'Missing payment details.'
    en lugar de un error de validación genérico. Los números JSON se aceptan
    como texto (p. ej. cvv: 123).
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    cardNumber: Optional[str] = None
    expiryDate: Optional[str] = None
    cvv: Optional[str] = None
    cardHolderName: Optional[str] = None
    amount: Optional[Union[int, float, str]] = None

    def is_complete(self) -> bool:
        return all([self.cardNumber, self.expiryDate, self.cvv, self.cardHolderName, self.amount])

    def masked_card(self) -> str:
        return f"****{(self.cardNumber or '')[-4:]}"


class PaymentResponse(BaseModel):
    message: str
    transactionId: str
    amount: Union[int, float, str]
    status: str
