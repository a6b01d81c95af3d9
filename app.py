"""Uruchomienie serwera: python app.py (konfiguracja z .env / zmiennych środowiskowych)."""
import sys

from cnc_dashboard.server import main

if __name__ == '__main__':
    sys.exit(main())
