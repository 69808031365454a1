"""Core: dominio, configuración, contratos y orquestación (sin I/O directo)."""
