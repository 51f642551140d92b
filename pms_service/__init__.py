"""Backend del Sistema de Gestión de Estacionamiento: cuentas, tokens y pagos."""

__version__ = "1.0.0"
