from alert_api.main import run

run()
