from modelsentinel.ui.cli import run

run()
