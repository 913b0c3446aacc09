# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db perfumaria.db
  python app.py produto add --nome "Chanel N°5" --compra 450 --venda 699
  python app.py venda nova --cliente C001 --produto P001 --pagamento PIX_MP --status Pago
  python app.py frete simular --preco 189.9 --custo 120 --frete 25 --pagamento CREDIT_NOW
  python app.py ir calcular --faturamento 5000
  python app.py dashboard
"""

from perfumaria.adapters.cli import main

if __name__ == "__main__":
    main()
