from root_trust.cli import app

app()
