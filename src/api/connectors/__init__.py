"""Connectors por canal: adapters de borda para APIs externas.

Estrutura:
- instagram/: Instagram Messaging API (webhook + Graph API)
"""

__all__: list[str] = []
