"""App: coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: fluxos end-to-end (webhook → fila)
- use_cases/: casos de uso (ingestão de evento)
- services/: serviços de aplicação (tokens, entrega de DM, mídias, vínculo)
- infra/: implementações concretas de IO (stores, fila, auth, http)
- protocols/: contratos/interfaces e modelos
- domain/: regras puras (timestamps)
- observability/: correlation_id e métricas via logs
- constants/: textos das DMs

Padrão: app executa; api adapta; utils apoia.
"""
