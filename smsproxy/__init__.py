"""Proxy Alertmanager -> SMS (Twilio).

Este pacote contém:
- constants: variáveis de ambiente
- config: objeto de configuração e validação
- models: alerta, payload do webhook e resumo do envio
- utils: labels, truncamento e timestamps
- formatters: montagem do corpo do SMS
- services: cliente HTTP da Twilio (com retry)
- dispatcher: fan-out alerta x receiver
- ratelimit: limitador de janela fixa
- metrics: contadores Prometheus
- banner: resumo impresso na inicialização
- controller: criação do Flask app e endpoints
"""
