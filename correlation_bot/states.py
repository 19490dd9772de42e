from aiogram.fsm.state import State, StatesGroup


class PostState(StatesGroup):
    waiting_description = State()
