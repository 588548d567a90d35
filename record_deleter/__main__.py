from record_deleter.main import run

run()
