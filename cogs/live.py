"""
Extension Discord du suivi live : /live et /stop.
"""

import logging
from datetime import timedelta

import humanize
import interactions
from interactions import Extension, SlashContext, Task, IntervalTrigger, listen, slash_command

from fonctions.commentary.generator import CommentaryGenerator
from fonctions.errors import NoActiveMatch, PersistenceError, ProviderError, SessionAlreadyActive, UserNotRegistered
from fonctions.gestion_bdd import BddStore, get_registered_user
from fonctions.live.tracker import SessionTracker
from fonctions.match import MatchFetcher

log = logging.getLogger(__name__)


class LiveTracking(Extension):
    def __init__(self, bot):
        self.bot: interactions.Client = bot
        self.fetcher = MatchFetcher()
        self.tracker = SessionTracker(self.fetcher,
                                      CommentaryGenerator(),
                                      BddStore(),
                                      self.send_to_channel)

    @listen()
    async def on_startup(self):
        await self.tracker.retire_orphans()
        self.sessions_monitor.start()

    async def send_to_channel(self, channel_id: int, text: str):
        channel = await self.bot.fetch_channel(channel_id)
        return await channel.send(text)

    async def shutdown(self):
        """Appelé par main.py à l'extinction."""
        if self.sessions_monitor.running:
            self.sessions_monitor.stop()
        await self.tracker.stop_all()
        await self.fetcher.close()

    @Task.create(IntervalTrigger(minutes=1))
    async def sessions_monitor(self):
        for session in self.tracker.active_sessions():
            log.info(f"[Live] {session['user_id']} : match {session['match_id']}, "
                     f"{humanize.naturaldelta(timedelta(seconds=session['duration']))}, "
                     f"{session['events']} événement(s)")

    @slash_command(name='live',
                   description='Track your current game LIVE 🎮')
    async def live(self, ctx: SlashContext):

        await ctx.defer()

        try:
            user = get_registered_user(int(ctx.author.id))
        except UserNotRegistered as e:
            await ctx.send(f"❌ {e}")
            return
        except PersistenceError:
            await ctx.send('❌ Database unavailable, try again later.')
            return

        try:
            session = await self.tracker.start(int(ctx.author.id), user['puuid'], int(ctx.channel_id))
        except NoActiveMatch:
            await ctx.send('❌ No active game found! Start playing and try again. 🎮')
        except SessionAlreadyActive:
            await ctx.send('⚠️ Your game is already being tracked. Use /stop to end it.')
        except ProviderError as e:
            log.warning(f'[Live] /live impossible pour {ctx.author.id} : {e}')
            await ctx.send('❌ Riot API is not answering, try again in a minute.')
        else:
            await ctx.send(f'🔴 Live tracking on for **{session.champion_name}**. Use /stop to end it.')

    @slash_command(name='stop',
                   description='Stop tracking your live game')
    async def stop(self, ctx: SlashContext):
        await arreter_suivi(self.tracker, ctx)


async def arreter_suivi(tracker: SessionTracker, ctx: SlashContext):
    """/stop : l'arrêt attend la fin du polling et le récap, on diffère la réponse."""
    await ctx.defer(ephemeral=True)

    if await tracker.stop(int(ctx.author.id)):
        await ctx.send('🛑 Live tracking stopped.')
    else:
        await ctx.send('No live tracking running.')


def setup(bot):
    LiveTracking(bot)
