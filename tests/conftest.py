import os

# Evita criar arquivos de log durante a suíte
os.environ.setdefault("LOG_TO_FILE", "false")
