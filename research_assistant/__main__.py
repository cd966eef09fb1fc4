from research_assistant.main import run

run()
