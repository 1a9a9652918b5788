from projgen.cli import run

run()
