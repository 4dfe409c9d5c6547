"""API: camada de borda do Instagram.

Responsabilidades:
- Receber o webhook do Meta e o consumidor da fila
- Validar tokens e payloads de entrada
- Extrair eventos de DM para modelos internos
- Construir payloads para a Graph API

Subpastas:
- connectors/: cliente e gateway da Graph API, verificação do webhook
- normalizers/: payload do webhook -> MessagingEvent
- payload_builders/: corpo das DMs enviadas
- routes/: endpoints HTTP (webhook, fila, vínculo, internas, health)

NÃO PODE conter: persistência direta nem orquestração de use cases.
"""
