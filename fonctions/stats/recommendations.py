"""
Recommandations de champions : score d'adéquation par champion, calculé à
partir des écarts entre les moyennes du champion et les moyennes globales.
"""

from dataclasses import dataclass

from fonctions.stats.aggregation import AggregateStats, arrondi, records_to_df


# coefficients empiriques, à conserver tels quels
DEATH_PENALTY = (0.8, 1.2)   # (plus de morts que la moyenne, moins)
KDA_BONUS = (1.3, 0.9)       # (meilleur KDA que la moyenne, moins bon)
CS_BONUS = (1.2, 0.85)
WIN_BONUS = (1.5, 0.7)       # (winrate >= 50, < 50)

NB_RECOMMENDED = 3
NB_DISCOURAGED = 2


@dataclass(frozen=True)
class ChampionFitScore:
    name: str
    games: int
    win_rate: int
    avg_kda: float
    avg_cs: float
    avg_gold: int
    avg_damage: int
    avg_deaths: float
    fit_score: float


@dataclass
class Recommendations:
    all_champions: list[ChampionFitScore]
    recommended: list[ChampionFitScore]
    discouraged: list[ChampionFitScore]


def fit_score(win_rate: float, avg_kda: float, avg_cs: float, avg_deaths: float, stats: AggregateStats) -> float:
    death_penalty = DEATH_PENALTY[0] if avg_deaths > stats.avg_deaths else DEATH_PENALTY[1]
    kda_bonus = KDA_BONUS[0] if avg_kda > stats.avg_kda else KDA_BONUS[1]
    cs_bonus = CS_BONUS[0] if avg_cs > stats.avg_cs else CS_BONUS[1]
    win_bonus = WIN_BONUS[0] if win_rate >= 50 else WIN_BONUS[1]

    return (win_rate * win_bonus + avg_kda * kda_bonus + avg_cs * cs_bonus - avg_deaths * death_penalty) / 10


def champion_fit_scores(stats: AggregateStats) -> list[ChampionFitScore]:
    """Score de chaque champion, dans l'ordre de rencontre."""
    df = records_to_df(stats.matches)
    df_champ = df.groupby('champion_name', sort=False).agg(games=('champion_name', 'count'),
                                                            wins=('win', 'sum'),
                                                            total_kda=('kda', 'sum'),
                                                            total_cs=('cs', 'sum'),
                                                            total_damage=('damage', 'sum'),
                                                            total_gold=('gold', 'sum'),
                                                            total_deaths=('deaths', 'sum'))

    scores = []
    for name, row in df_champ.iterrows():
        games = int(row['games'])
        avg_kda = arrondi(row['total_kda'] / games, 2)
        avg_cs = arrondi(row['total_cs'] / games, 1)
        avg_deaths = arrondi(row['total_deaths'] / games, 1)
        win_rate = int(arrondi(int(row['wins']) * 100 / games))

        scores.append(ChampionFitScore(
            name=name,
            games=games,
            win_rate=win_rate,
            avg_kda=avg_kda,
            avg_cs=avg_cs,
            avg_gold=int(arrondi(row['total_gold'] / games)),
            avg_damage=int(arrondi(row['total_damage'] / games)),
            avg_deaths=avg_deaths,
            fit_score=arrondi(fit_score(win_rate, avg_kda, avg_cs, avg_deaths, stats), 2),
        ))
    return scores


def analyze_champion_recommendations(stats: AggregateStats) -> Recommendations:
    """Top 3 recommandés, 2 derniers déconseillés.

    Avec moins de 5 champions, les deux listes peuvent se recouvrir.
    """
    ranked = sorted(champion_fit_scores(stats), key=lambda c: c.fit_score, reverse=True)
    return Recommendations(all_champions=ranked,
                           recommended=ranked[:NB_RECOMMENDED],
                           discouraged=ranked[-NB_DISCOURAGED:])


def _discouraged_reason(champ: ChampionFitScore, stats: AggregateStats) -> str:
    if champ.win_rate < 40:
        return 'Terrible win rate'
    if champ.avg_deaths > stats.avg_deaths + 2:
        return 'You die too much'
    if champ.avg_kda < stats.avg_kda:
        return 'Weak KDA'
    return 'Not working for you'


def build_champion_report(stats: AggregateStats, recommendations: Recommendations) -> str:
    report = ['🎯 **PERSONALIZED CHAMPION RECOMMENDATIONS**\n',
              '✅ **Best Champions For You:**']

    medals = ['🥇', '🥈', '🥉']
    for medal, champ in zip(medals, recommendations.recommended):
        report.append(f"{medal} **{champ.name}**\n"
                      f"  • Win Rate: {champ.win_rate}%\n"
                      f"  • Avg KDA: {champ.avg_kda}\n"
                      f"  • Avg CS: {champ.avg_cs}\n"
                      f"  • Games: {champ.games}\n")

    if recommendations.recommended:
        top = recommendations.recommended[0]
        report.append('\n📊 **Why These Champions Work For You:**')
        if top.win_rate >= 50:
            report.append(f"✓ {top.name} has {top.win_rate}% win rate - your most consistent pick")
        if top.avg_kda > stats.avg_kda:
            report.append(f"✓ Better KDA than your average ({top.avg_kda} vs {stats.avg_kda})")
        if top.avg_deaths < stats.avg_deaths:
            report.append(f"✓ Fewer deaths ({top.avg_deaths} vs {stats.avg_deaths} avg) - safer playstyle")
        if top.avg_cs > stats.avg_cs:
            report.append(f"✓ Higher CS ({top.avg_cs}) - better farming with this champ")

    report.append('\n\n❌ **STOP PICKING THESE:**')
    for champ in recommendations.discouraged:
        report.append(f"❌ {champ.name} - {champ.win_rate}% WR ({_discouraged_reason(champ, stats)})")

    report.append('\n\n🔍 **YOUR PLAYSTYLE ANALYSIS:**')
    if stats.avg_cs_per_min < 4.5:
        report.append("⚠️ Low CS - You're weak at farming. Pick champions that don't need scaling")
    elif stats.avg_cs_per_min > 7:
        report.append('✓ Good CS - You can pick scaling champions and carry late game')

    if stats.avg_deaths > 6:
        report.append('⚠️ High deaths - Pick safer champions with better escape mechanics')
    elif stats.avg_deaths < 4:
        report.append('✓ Low deaths - You can play aggressive champions')

    if stats.avg_kda < 1.5:
        report.append('⚠️ Low KDA - Focus on utility/support champions over carry champions')
    elif stats.avg_kda > 3:
        report.append('✓ High KDA - You can hard carry on mechanical champions')

    return '\n'.join(report)
