"""Payload builders por canal: construção de payloads para APIs externas.

Estrutura:
- instagram/: Instagram Messaging API
"""

__all__: list[str] = []
