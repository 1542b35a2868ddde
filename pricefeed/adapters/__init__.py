from .starlette_transport import StarletteTransport

__all__ = ['StarletteTransport']
