"""
Built-in Card Deck - The action deck used when no card file is configured.

Rows follow the card file layout read by effects.card_loader:

    id;name;type;text;freeAction;scanSector;revenue;cost;gain;constraint
"""

from __future__ import annotations
import logging

from ..effects.card_loader import parse_cards
from ..engine_core.state import Card

logger = logging.getLogger(__name__)

BUILTIN_CARDS_CSV = """\
id;name;type;text;freeAction;scanSector;revenue;cost;gain;constraint
9;Falcon Heavy;Action;Gagnez 2 sondes et 1 Média. Ignorez la limite de sondes pour ces lancements.;1 Déplacement;Jaune;1 Crédit;3 Crédits;2 Sondes + 1 Média;IGNORE_PROBE_LIMIT
11;Subventions;Action;Gagnez 1 Carte. Révélez-la et bénéficiez de son action gratuite.;1 Média;Jaune;1 Energie;1 Crédit;1 Pioche;REVEAL_AND_TRIGGER_FREE_ACTION
13;Rover Perseverance;Action;Gagnez 1 Atterrissage.;1 Média;Bleu;1 Pioche;1 Crédit;1 Atterrissage;
15;Rentrée Atmosphérique;Action;Retirez l'un de vos orbiteurs pour gagner 3 PV, 1 Donnée et 1 Carte.;1 Déplacement;Bleu;1 Crédit;1 Crédit;;ATMOSPHERIC_ENTRY
16;Dragonfly;Action;Gagnez 1 Atterrissage. Vous pouvez vous poser sur une lune sans limite.;1 Déplacement;Bleu;1 Crédit;1 Crédit;1 Atterrissage;IGNORE_SATELLITE_LIMIT
17;OSIRIS-REx;Action;Gagnez 2 Données si votre sonde est sur un champ d'astéroïdes et 1 Donnée par champ adjacent.;1 Déplacement;Jaune;1 Energie;1 Crédit;;OSIRIS_REX_BONUS
19;Assistance Gravitationnelle;Action;Gagnez 2 Déplacements. En visitant une planète ce tour-ci, choisissez 1 Déplacement au lieu de 1 Média.;1 Média;Jaune;1 Crédit;1 Crédit;2 Déplacements;CHOICE_MEDIA_OR_MOVE
20;Survol de Mercure;Action;Gagnez 2 Déplacements. Si vous visitez Mercure ce tour-ci, gagnez 4 PV.;1 Média;Rouge;1 Energie;1 Crédit;2 Déplacements;VISIT_PLANET:mercury:4
21;Survol de Vénus;Action;Gagnez 2 Déplacements. Si vous visitez Vénus ce tour-ci, gagnez 3 PV.;1 Média;Jaune;1 Crédit;1 Crédit;2 Déplacements;VISIT_PLANET:venus:3
22;Survol de Mars;Action;Gagnez 2 Déplacements. Si vous visitez Mars ce tour-ci, gagnez 4 PV.;1 Donnée;Jaune;1 Energie;1 Crédit;2 Déplacements;VISIT_PLANET:mars:4
23;Survol de Jupiter;Action;Gagnez 2 Déplacements. Si vous visitez Jupiter ce tour-ci, gagnez 4 PV.;1 Média;Bleu;1 Energie;1 Crédit;2 Déplacements;VISIT_PLANET:jupiter:4
25;Voile Solaire;Action;Gagnez 4 Déplacements. Gagnez 1 PV par planète unique visitée ce tour-ci.;1 Média;Rouge;1 Crédit;2 Crédits;4 Déplacements;VISIT_UNIQUE:1
26;A Travers la Ceinture d'Astéroïdes;Action;Gagnez 2 Déplacements. Quittez les champs d'astéroïdes sans restriction ce tour-ci.;1 Donnée;Bleu;1 Pioche;1 Crédit;2 Déplacements;ASTEROID_EXIT_COST:1
57;Radiotélescope d'Effelsberg;Action;Gagnez 1 Carte, 1 Rotation et 1 Technologie Observation.;1 Média;Bleu;1 Energie;3 Crédits;1 Carte + 1 Rotation + 1 Tech Observation;
59;Système de Propulsion Ionique;Action;Gagnez 1 Energie, 1 Rotation et 1 Technologie Exploration.;1 Média;Rouge;1 Pioche;3 Crédits;1 Energie + 1 Rotation + 1 Tech Exploration;
69;Grand Collisionneur de Hadrons;Action;Gagnez 1 Donnée, 1 Rotation et 1 Technologie Informatique.;1 Déplacement;Noir;1 Energie;3 Crédits;1 Donnée + 1 Rotation + 1 Tech Informatique;
71;Recherche Ciblée;Action;Gagnez 1 Rotation et 1 Technologie. Puis 2 PV par technologie de ce type possédée.;1 Média;Rouge;1 Crédit;3 Crédits;1 Rotation + 1 Tech;SCORE_PER_TECH_TYPE:2
72;Coopération Scientifique;Action;Gagnez 1 Rotation et 1 Technologie. Si un autre joueur la possède déjà, gagnez 2 Médias.;1 Donnée;Bleu;1 Energie;3 Crédits;1 Rotation + 1 Tech;MEDIA_IF_SHARED_TECH:2
73;Initiative Clean Space;Action;Défaussez les 3 cartes de la rangée pour effectuer leurs actions gratuites.;1 Média;Jaune;1 Crédit;1 Crédit;;DISCARD_ROW_FOR_FREE_ACTIONS
74;Essais de Prélancement;Action;Gagnez 1 Sonde et 1 Déplacement par carte à action gratuite de déplacement révélée de votre main.;1 Média;Jaune;1 Pioche;2 Crédits;;REVEAL_MOVEMENT_CARDS_FOR_BONUS
85;Lanceur Starship;Action;Gagnez 1 Sonde, 1 Rotation et 1 Technologie Exploration.;1 Média;Rouge;1 Crédit;4 Crédits;1 Sonde + 1 Rotation + 1 Tech Exploration;
90;Réservoirs d'Ergols;Action;Gagnez 1 Energie par carte à revenu Energie révélée de votre main.;1 Donnée;Bleu;1 Pioche;1 Crédit;;GAIN_ENERGY_PER_ENERGY_REVENUE
91;Réacteur à Fusion;Action;Gagnez 1 Energie par carte Energie sous vos revenus. Puis réservez cette carte.;1 Média;Rouge;1 Energie;3 Crédits;;GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE
92;Photo du Jour de la NASA;Action;Gagnez 2 Médias et 1 Média par carte Pioche sous vos revenus. Puis réservez cette carte.;1 Donnée;Bleu;1 Pioche;3 Crédits;2 Médias;GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE
93;Financement Public;Action;Gagnez 3 PV par carte Crédit sous vos revenus. Puis réservez cette carte.;1 Média;Jaune;1 Crédit;3 Crédits;;GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE
109;Microprocesseurs Basse Consommation;Action;Gagnez 1 Energie, 1 Rotation et 1 Technologie Informatique.;1 Donnée;Jaune;1 Pioche;3 Crédits;1 Energie + 1 Rotation + 1 Tech Informatique;
110;Conférence de Presse;Action;Gagnez 3 Médias.;1 Donnée;Rouge;1 Crédit;1 Crédit;3 Médias;
119;PIXL;Action;Gagnez 1 Rotation et 1 Technologie Informatique. Puis 1 PV par niveau de Média.;1 Donnée;Bleu;1 Energie;3 Crédits;1 Rotation + 1 Tech Informatique;SCORE_PER_MEDIA:1
121;Futur Collisionneur Circulaire;Action;Gagnez 3 Données, 1 Rotation et 1 Technologie Informatique.;1 Déplacement;Jaune;1 Energie;4 Crédits;3 Données + 1 Rotation + 1 Tech Informatique;
123;Survol d'Astéroïdes;Action;Gagnez 1 Déplacement. Si vous visitez un champ d'astéroïdes ce tour-ci, gagnez 1 Donnée.;1 Média;Rouge;1 Pioche;0 Crédit;1 Déplacement;VISIT_ASTEROID:1
124;Rencontre avec une Comète;Action;Gagnez 2 Déplacements. Si vous visitez une comète ce tour-ci, gagnez 4 PV.;1 Média;Jaune;1 Energie;1 Crédit;2 Déplacements;VISIT_COMET:4
125;Correction de Trajectoire;Action;Gagnez 1 Déplacement. Si vous vous déplacez sur le même disque ce tour-ci, gagnez 3 PV et 1 Média.;1 Donnée;Bleu;1 Pioche;1 Crédit;1 Déplacement;SAME_DISK_MOVE:3:1
130;Lancement Spatial à Faible Coût;Action;Gagnez 1 Sonde.;1 Média;Jaune;1 Energie;1 Crédit;1 Sonde;
133;Fenêtre de Lancement Optimale;Action;Gagnez 1 Sonde, puis 1 Déplacement par planète ou comète dans le secteur de la Terre.;1 Donnée;Rouge;1 Pioche;2 Crédits;;OPTIMAL_LAUNCH_WINDOW
137;Archives de Données du SETI;Action;Gagnez 2 Données.;1 Média;Noir;1 Energie;1 Crédit;2 Données;
140;Radiotélescope d'Arecibo;Action;Marquez 1 signal Jaune et 1 signal Rouge.;1 Média;Jaune;1 Crédit;2 Crédits;1 Signal Jaune + 1 Signal Rouge;
141;Very Large Array;Action;Marquez 2 signaux dans un secteur Bleu.;1 Donnée;Bleu;1 Energie;2 Crédits;2 Signaux Bleu;
142;Télescope Spatial James Webb;Action;Marquez 1 signal dans le secteur de chacune de vos sondes.;1 Déplacement;Noir;1 Pioche;3 Crédits;1 Signal Sonde;ANY_PROBE
143;Réseau de Radiotélescopes;Action;Marquez 1 signal dans le secteur de la Terre et ses voisins.;1 Média;Rouge;1 Crédit;2 Crédits;1 Signal Terre;GAIN_SIGNAL_ADJACENTS
144;Observatoire de Parkes;Action;Marquez 1 signal d'une carte de la rangée. Récupérez-la si c'est votre seul signal.;1 Donnée;Jaune;1 Energie;1 Crédit;1 Signal Rangée;KEEP_CARD_IF_ONLY
145;Balayage Profond;Action;Effectuez 1 scan sans gagner de donnée.;1 Média;Noir;1 Pioche;1 Crédit;1 Scan;NO_DATA
146;Analyse Spectrale;Action;Défaussez des cartes de votre main pour marquer un signal de leur couleur.;1 Déplacement;Rouge;1 Crédit;2 Crédits;;GAIN_SIGNAL_FROM_HAND:2
147;Relais Lunaire;Action;Gagnez 1 Carte de la rangée et 1 Réservation.;1 PV + 1 Déplacement;Bleu;1 Crédit;1 Crédit;1 Carte;
148;Découverte Microbienne;Action;Gagnez 1 Trace Rouge.;2 Médias;Rouge;1 Energie;2 Crédits;1 Trace Rouge;
149;Biosignature;Action;Gagnez 1 Trace Bleu et 1 Donnée.;1 PV + 1 Donnée;Bleu;1 Pioche;3 Crédits;1 Trace Bleu + 1 Donnée;
150;Échantillon d'Astéroïde;Action;Gagnez 1 Déplacement. Si vous visitez un champ d'astéroïdes ce tour-ci, gagnez 1 Trace Jaune.;1 Média;Jaune;1 Crédit;1 Crédit;1 Déplacement;GAIN_LIFETRACE_IF_ASTEROID:yellow:1
151;Couverture Médiatique;Action;Gagnez 1 Scan. Si vous remportez un secteur ce tour-ci, gagnez 2 Médias.;1 Donnée;Noir;1 Energie;2 Crédits;1 Scan;BONUS_IF_COVERED:media
201;Mission Europa Clipper;Mission Conditionnelle;Mettez une sonde en orbite autour de Jupiter puis d'une autre planète.;1 Média;Bleu;1 Crédit;2 Crédits;;GAIN_IF_ORBITER:jupiter:pv:4 + GAIN_IF_ORBITER:any:media:2
202;Mission Mars Sample Return;Mission Conditionnelle;Posez une sonde sur Mars.;1 Déplacement;Rouge;1 Energie;2 Crédits;;GAIN_IF_LANDER:mars:pv:5
203;Programme de Recherche;Mission Conditionnelle;Possédez une technologie de chaque type.;1 Donnée;Jaune;1 Pioche;1 Crédit;;GAIN_IF_TECH:yellow:credit:1 + GAIN_IF_TECH:red:energy:1 + GAIN_IF_TECH:blue:data:1
204;Campagne Publique;Mission Conditionnelle;Atteignez 8 Médias.;1 Média;Noir;1 Crédit;1 Crédit;;GAIN_IF_MEDIA:8:pv:4
205;Cartographie du Ciel;Mission Conditionnelle;Remportez 2 secteurs.;1 Donnée;Bleu;1 Energie;2 Crédits;;GAIN_IF_COVERED:2:pv:6
206;Flotte de Sondes;Mission Conditionnelle;Ayez 2 sondes dans le système solaire.;1 Déplacement;Jaune;1 Crédit;1 Crédit;;GAIN_IF_PROBES:2:data:2
207;Quête de Vie;Mission Conditionnelle;Placez une trace de vie rouge puis bleue.;1 Média;Rouge;1 Pioche;2 Crédits;;GAIN_IF_LIFETRACE:red:pv:3 + GAIN_IF_LIFETRACE:blue:pv:3
208;Réserve Stratégique;Mission Conditionnelle;Accumulez 6 crédits.;1 Donnée;Noir;1 Energie;1 Crédit;;GAIN_IF_CREDITS:6:media:2
211;Réseau d'Orbiteurs;Mission Déclenchable;Gagnez 2 Médias à chaque mise en orbite.;1 Média;Jaune;1 Crédit;2 Crédits;;GAIN_ON_ORBIT:media:2
212;Atterrisseur Autonome;Mission Déclenchable;Gagnez 3 PV à chaque atterrissage.;1 Déplacement;Rouge;1 Energie;2 Crédits;;GAIN_ON_LAND:pv:3
213;Veille Radio;Mission Déclenchable;Gagnez 1 Donnée à chaque signal jaune.;1 Donnée;Jaune;1 Pioche;1 Crédit;;GAIN_ON_SIGNAL:yellow:data:1
214;Programme de Lancement;Mission Déclenchable;Gagnez 1 Média à chaque lancement de sonde.;1 Média;Bleu;1 Crédit;1 Crédit;;GAIN_ON_LAUNCH:media:1
215;Survol de Saturne;Mission Déclenchable;Gagnez 4 PV en visitant Saturne.;1 Déplacement;Noir;1 Energie;1 Crédit;;GAIN_ON_VISIT:saturn:pv:4
216;Partenariat Technologique;Mission Déclenchable;Gagnez 2 PV à chaque technologie Exploration.;1 Donnée;Rouge;1 Crédit;2 Crédits;;GAIN_ON_TECH:yellow:pv:2
221;Conseil de Solvay;Fin de partie;3 PV par série technologie, trace de vie et sonde posée.;1 Média;Noir;1 Crédit;2 Crédits;;SCORE_SOLVAY
222;Grand Relevé du Ciel;Fin de partie;2 PV par secteur rouge où vous avez un signal.;1 Donnée;Rouge;1 Energie;2 Crédits;;SCORE_PER_SECTOR:red:2
223;Exploration Planétaire;Fin de partie;2 PV par orbiteur ou atterrisseur.;1 Déplacement;Jaune;1 Pioche;2 Crédits;;SCORE_PER_ORBITER_LANDER:any:2
224;Exobiologie;Fin de partie;2 PV par trace de vie bleue.;1 Média;Bleu;1 Crédit;2 Crédits;;SCORE_PER_LIFETRACE:blue:2
225;Planètes Solitaires;Fin de partie;3 PV par planète où vous êtes seul.;1 Donnée;Noir;1 Energie;3 Crédits;;SCORE_IF_UNIQUE:3
226;Chasseur d'Astéroïdes;Fin de partie;5 PV si une de vos sondes est sur un champ d'astéroïdes.;1 Déplacement;Jaune;1 Crédit;1 Crédit;;SCORE_IF_PROBE_ON_ASTEROID:5
"""


def builtin_cards() -> list[Card]:
    """Parse the built-in deck. Each call returns fresh templates in file order."""
    report = parse_cards(BUILTIN_CARDS_CSV)
    if report.misses:
        logger.warning("Built-in deck has unparsed effects on %s", sorted(report.misses))
    return report.cards
