"""Adaptadores de I/O (HTTP/Shippo) que implementan los contratos del Core."""
