"""Modelos y entidades del dominio.

Aquí viven las estructuras de datos puras (Pydantic v2): requests hacia el
servicio de Sideko y las entidades que devuelve. El dominio no conoce HTTP
ni la CLI.
"""
