from tracker.server.app import run

run()
