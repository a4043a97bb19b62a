# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# Este archivo es el punto de entrada para servidores WSGI como Gunicorn.
#
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── app_pdv/         <- Paquete Python
#       ├── __init__.py
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# Con esta estructura, los imports absolutos funcionan SIN manipular sys.path:
#   from app_pdv.main import create_app  ✓
#   from app_pdv.services import SalesService  ✓
#
# ==============================================================================

from app_pdv.config import server_options
from app_pdv.main import create_app

app = create_app()

# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================
# Variable 'app' exportada para Gunicorn:
#   gunicorn wsgi:app
#
# Para desarrollo local:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    app.run(**server_options())
