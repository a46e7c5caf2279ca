import asyncio
import logging
import os

import interactions

from fonctions.gestion_bdd import preparer_tables
from utils.params import discord_token


logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s %(levelname)s %(name)s : %(message)s')
log = logging.getLogger(__name__)


bot = interactions.Client(token=discord_token, intents=interactions.Intents.DEFAULT)


def charger_extensions():
    for filename in sorted(os.listdir('./cogs')):
        if filename.endswith('.py'):
            bot.load_extension(f'cogs.{filename[:-3]}')


async def main():
    preparer_tables()
    charger_extensions()
    try:
        await bot.astart()
    finally:
        # arrêt propre : sessions live closes en BDD
        live = bot.get_ext('LiveTracking')
        if live is not None:
            await live.shutdown()
        roast = bot.get_ext('Roast')
        if roast is not None:
            await roast.fetcher.close()
        log.info('Bot arrêté')


if __name__ == '__main__':
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
