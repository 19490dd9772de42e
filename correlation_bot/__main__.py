from correlation_bot.main import run


run()
