# ==============================================================================
# APP PDV - Punto de venta
# ==============================================================================
# Uso:
#   from app_pdv.main import create_app
#   app = create_app()
# ==============================================================================

__version__ = '1.0.0'
