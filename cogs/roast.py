"""
Extension Discord des roasts hors live : inscription, dernier match,
analyse de l'historique et aide.
"""

import asyncio
import logging
import re

import interactions
from interactions import (
    Extension,
    slash_command,
    slash_option,
    SlashContext,
    OptionType,
    Button,
    ButtonStyle,
    ActionRow,
    component_callback,
    ComponentContext,
)

from fonctions.commentary.generator import CommentaryGenerator
from fonctions.commentary.templates import match_overview_message
from fonctions.errors import (AccountNotFound,
                              GenerationFailed,
                              NoMatchesFound,
                              NotFound,
                              PersistenceError,
                              ProviderError,
                              UserNotRegistered)
from fonctions.gestion_bdd import get_registered_user, save_user, update_user_stats
from fonctions.match import MatchFetcher, extract_player_stats, extract_timeline_roasts
from fonctions.stats import (analyze_champion_recommendations,
                             analyze_match_history,
                             build_champion_report,
                             generate_stats_roast)
from utils.params import Version, match_history_count

log = logging.getLogger(__name__)

# =============================================================================
# CONSTANTES
# =============================================================================

RIOT_ID_PATTERN = re.compile(r"^(?P<name>[^#]+)#(?P<tag>[^#]+)$")
TIMELINE_BUTTON = re.compile(r"roast_timeline_(yes|no)_(\d+)")
TAILLE_MESSAGE = 1900

FALLBACK_MATCH_ROAST = "Even the AI gave up on this game. That says enough."


def decouper_texte(texte: str, taille: int = TAILLE_MESSAGE) -> list[str]:
    return [texte[i:i + taille] for i in range(0, len(texte), taille)] or ['']


def parse_riot_id(riot_id: str):
    """'Pseudo#TAG' -> ('Pseudo', 'TAG'), None si le format est invalide."""
    match = RIOT_ID_PATTERN.match(riot_id.strip())
    if not match:
        return None
    return match.group('name').strip(), match.group('tag').strip()


def help_message() -> str:
    return ("🤖 **LEAGUE ROASTER BOT**\n\n"
            "`/start GameName#TAG` - Register your Riot account (and get roasted for your name)\n"
            "`/roast` - Roast your latest match\n"
            "`/analysis` - Analyze your last games and get champion recommendations\n"
            "`/live` - Track your current game live 🔴\n"
            "`/stop` - Stop live tracking\n"
            "`/help` - This message\n\n"
            f"Version {Version}")


class Roast(Extension):
    def __init__(self, bot):
        self.bot: interactions.Client = bot
        self.fetcher = MatchFetcher()
        self.commentary = CommentaryGenerator()
        # utilisateur -> (match_id, puuid, stats) en attente d'un roast timeline
        self._pending_timeline: dict[int, tuple[str, str, dict]] = {}

    async def _registered_user(self, ctx: SlashContext):
        """Utilisateur inscrit, ou None après avoir répondu à sa place."""
        try:
            return get_registered_user(int(ctx.author.id))
        except UserNotRegistered as e:
            await ctx.send(f'❌ {e}')
        except PersistenceError:
            await ctx.send('❌ Database unavailable, try again later.')
        return None

    # =========================================================================
    # COMMANDE : /start
    # =========================================================================

    @slash_command(name='start',
                   description='Register your Riot account')
    @slash_option(
        name='riot_id',
        description='GameName#TAG',
        opt_type=OptionType.STRING,
        required=True,
    )
    async def start(self, ctx: SlashContext, riot_id: str):
        parsed = parse_riot_id(riot_id)
        if parsed is None:
            await ctx.send('❌ Invalid Riot ID. Use the format `GameName#TAG`.', ephemeral=True)
            return

        await ctx.defer()
        game_name, tag_line = parsed

        try:
            account = await self.fetcher.fetch_account(game_name, tag_line)
        except AccountNotFound:
            await ctx.send(f'❌ Riot account **{game_name}#{tag_line}** not found.')
            return
        except ProviderError as e:
            log.warning(f'[Roast] /start impossible pour {riot_id} : {e}')
            await ctx.send('❌ Riot API is not answering, try again in a minute.')
            return

        try:
            save_user(int(ctx.author.id),
                      account['puuid'],
                      account.get('gameName', game_name),
                      account.get('tagLine', tag_line))
        except PersistenceError:
            await ctx.send('❌ Database unavailable, try again later.')
            return

        try:
            roast = await self.commentary.roast_player_name(game_name, tag_line)
        except GenerationFailed as e:
            log.warning(f'[Roast] Pas de roast du pseudo : {e}')
            roast = f'{game_name}... I have nothing to say. The name speaks for itself.'

        await ctx.send(f'✅ Registered as **{game_name}#{tag_line}**!\n\n🔥 {roast}')

    # =========================================================================
    # COMMANDE : /roast
    # =========================================================================

    @slash_command(name='roast',
                   description='Roast your latest match')
    async def roast(self, ctx: SlashContext):
        await ctx.defer()

        user = await self._registered_user(ctx)
        if user is None:
            return

        puuid = user['puuid']
        try:
            match_ids = await self.fetcher.fetch_match_ids(puuid, 1)
            if not match_ids:
                raise NoMatchesFound(puuid)
            match_id = match_ids[0]
            stats = extract_player_stats(await self.fetcher.fetch_match(match_id), puuid)
        except NotFound as e:
            await ctx.send(f'❌ {e}')
            return
        except ProviderError as e:
            log.warning(f'[Roast] /roast impossible pour {ctx.author.id} : {e}')
            await ctx.send('❌ Riot API is not answering, try again in a minute.')
            return

        try:
            roast = await self.commentary.roast_match_performance(stats)
        except GenerationFailed as e:
            log.warning(f'[Roast] Pas de roast du match {match_id} : {e}')
            roast = FALLBACK_MATCH_ROAST

        try:
            await asyncio.to_thread(update_user_stats, int(ctx.author.id), match_id, stats)
        except PersistenceError:
            log.error(f'[Roast] Stats non sauvegardées pour {ctx.author.id}')

        for part in decouper_texte(match_overview_message(stats, roast)):
            await ctx.send(part)

        self._pending_timeline[int(ctx.author.id)] = (match_id, puuid, stats)
        buttons = ActionRow(
            Button(
                style=ButtonStyle.RED,
                label='Yes, roast the timeline 🔥',
                custom_id=f'roast_timeline_yes_{int(ctx.author.id)}',
            ),
            Button(
                style=ButtonStyle.SECONDARY,
                label='No thanks',
                custom_id=f'roast_timeline_no_{int(ctx.author.id)}',
            ),
        )
        await ctx.send('Want a minute-by-minute breakdown of your game?', components=[buttons])

    @component_callback(TIMELINE_BUTTON)
    async def on_timeline_choice(self, ctx: ComponentContext):
        match = TIMELINE_BUTTON.match(ctx.custom_id)
        if not match:
            return

        choice, user_id = match.group(1), int(match.group(2))
        if int(ctx.author.id) != user_id:
            await ctx.send('These buttons are not for you.', ephemeral=True)
            return

        pending = self._pending_timeline.pop(user_id, None)
        if choice == 'no' or pending is None:
            await ctx.edit_origin(content='Alright, your dignity is safe. For now.', components=[])
            return

        await ctx.edit_origin(content='⏳ Digging through the timeline...', components=[])

        match_id, puuid, stats = pending
        try:
            timeline = await self.fetcher.fetch_timeline(match_id)
            timeline_stats = extract_timeline_roasts(timeline, puuid)
            roast = await self.commentary.roast_timeline(stats, timeline_stats)
        except (NotFound, ProviderError, GenerationFailed) as e:
            log.warning(f'[Roast] Roast timeline impossible pour {match_id} : {e!r}')
            await ctx.send('❌ Could not roast the timeline this time.')
            return

        for part in decouper_texte(f'⏱️ **TIMELINE ROAST**\n\n{roast}'):
            await ctx.send(part)

    # =========================================================================
    # COMMANDE : /analysis
    # =========================================================================

    @slash_command(name='analysis',
                   description='Analyze your last games')
    @slash_option(
        name='nombre',
        description=f'Number of games (default: {match_history_count})',
        opt_type=OptionType.INTEGER,
        required=False,
        min_value=1,
        max_value=100,
    )
    async def analysis(self, ctx: SlashContext, nombre: int = match_history_count):
        await ctx.defer()

        user = await self._registered_user(ctx)
        if user is None:
            return

        try:
            stats = await analyze_match_history(self.fetcher, user['puuid'], nombre)
        except NotFound as e:
            await ctx.send(f'❌ {e}')
            return
        except ProviderError as e:
            log.warning(f'[Roast] /analysis impossible pour {ctx.author.id} : {e}')
            await ctx.send('❌ Riot API is not answering, try again in a minute.')
            return

        recommendations = analyze_champion_recommendations(stats)

        lines = [f'📊 **ANALYSIS OF YOUR LAST {stats.total_games} GAMES**\n',
                 f'🏆 Record: {stats.wins}W - {stats.losses}L ({stats.win_rate}%)',
                 f'⚔️ Avg K/D/A: {stats.avg_kills}/{stats.avg_deaths}/{stats.avg_assists} (KDA {stats.avg_kda})',
                 f'🧿 Avg CS: {stats.avg_cs} ({stats.avg_cs_per_min}/min)',
                 f'💰 Avg Gold: {int(stats.avg_gold)} | ⚡ Avg Damage: {int(stats.avg_damage)}',
                 f'👁️ Avg Vision: {stats.avg_vision}',
                 f'⚰️ Worst game: {stats.max_deaths} deaths\n',
                 f'🔥 **ROAST:** {generate_stats_roast(stats)}']

        try:
            lines.append(f'🎙️ *{await self.commentary.roast_stats_summary(stats)}*')
        except GenerationFailed as e:
            log.info(f'[Roast] Pas de résumé IA : {e}')

        lines.append('\n' + build_champion_report(stats, recommendations))

        for part in decouper_texte('\n'.join(lines)):
            await ctx.send(part)

    # =========================================================================
    # COMMANDE : /help
    # =========================================================================

    @slash_command(name='help',
                   description='List the bot commands')
    async def help(self, ctx: SlashContext):
        await ctx.send(help_message(), ephemeral=True)


# =============================================================================
# SETUP
# =============================================================================

def setup(bot):
    Roast(bot)
