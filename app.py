# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db joias.db
  python app.py joia cadastrar --codigo AN001 --nome "Anel Solitário" ...
  python app.py venda registrar --cliente "Maria" --item AN001:1
  python app.py caixa resumo
  python app.py painel
"""

from joias.adapters.cli import main

if __name__ == "__main__":
    main()
