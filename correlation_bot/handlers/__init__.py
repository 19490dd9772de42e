from aiogram import Router

from correlation_bot.handlers import listing, manage, migrate, prompt, start, submit


router = Router()
router.include_router(start.router)
router.include_router(prompt.router)
router.include_router(listing.router)
router.include_router(manage.router)
router.include_router(migrate.router)
# Pending descriptions go last so commands still work while a post is pending.
router.include_router(submit.router)
