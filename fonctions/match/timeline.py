"""
Moments clés d'un joueur dans la timeline d'un match (roast timeline).
"""


def participant_id_for(timeline: dict, puuid: str):
    """L'id participant (1 à 10) correspond à la position du puuid dans metadata.participants."""
    participants = timeline.get('metadata', {}).get('participants', [])
    if puuid in participants:
        return participants.index(puuid) + 1
    for participant in timeline.get('info', {}).get('participants', []):
        if participant.get('puuid') == puuid:
            return participant.get('participantId')
    return None


def extract_timeline_roasts(timeline: dict, puuid: str) -> dict:
    """Compte kills / morts / assists et relève les moments gênants du joueur."""
    resume = {
        'totalKills': 0,
        'totalDeaths': 0,
        'totalAssists': 0,
        'earlyGameStruggles': [],
        'lateGameFailures': [],
        'keyMoments': [],
    }

    frames = timeline.get('info', {}).get('frames')
    participant_id = participant_id_for(timeline, puuid)
    if not frames or participant_id is None:
        return resume

    for frame in frames:
        for event in frame.get('events', []):
            minutes = int(event.get('timestamp', frame.get('timestamp', 0)) / 1000 // 60)

            if event.get('type') == 'CHAMPION_KILL':
                if event.get('killerId') == participant_id:
                    resume['totalKills'] += 1
                    if minutes < 15:
                        resume['keyMoments'].append(f'Early game kill at {minutes}m (possibly lucky)')

                if event.get('victimId') == participant_id:
                    resume['totalDeaths'] += 1
                    if minutes < 10:
                        resume['earlyGameStruggles'].append(f'Died at {minutes}m (feeding early)')
                    elif minutes > 30:
                        resume['lateGameFailures'].append(f'Died at {minutes}m (critical moment)')

                if participant_id in (event.get('assistingParticipantIds') or []):
                    resume['totalAssists'] += 1

            elif event.get('type') == 'BUILDING_KILL' and event.get('killerId') == participant_id:
                if minutes < 20:
                    resume['keyMoments'].append(f'Split pushing early at {minutes}m')

    return resume
