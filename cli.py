# cli.py

"""
Запуск SiteSweep из корня репозитория без установки пакета.

Пример запуска:
    python cli.py crawl example.com --json reports/report.json --html reports/report.html
    python cli.py serve --port 8080
"""
from sitesweep.cli import cli

if __name__ == '__main__':
    cli(prog_name='sitesweep')
