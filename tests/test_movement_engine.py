from kingmaker.content.io import DEFAULT_MAP_PATH, FOG_OF_WAR_MAP_PATH, load_world_json
from kingmaker.sim.core import (
    INVALID_CROSS_REGION,
    INVALID_NOT_ADJACENT,
    INVALID_STALE_ORIGIN,
    INVALID_UNKNOWN_TILE,
    Invalid,
    Moved,
    NoOp,
    Session,
    SessionCommand,
)
from kingmaker.sim.hash import world_hash
from kingmaker.sim.movement import is_adjacent
from kingmaker.sim.navigation import GlobalScreen, OpenTileDetail, StayOnGlobalView, TileDetailScreen
from kingmaker.sim.world import HexCoord, RegionDef, TileRecord, WorldState


def _session(path: str = DEFAULT_MAP_PATH, party_tile_id: str | None = None) -> Session:
    world = load_world_json(path)
    if party_tile_id is not None:
        world.party_tile_id = party_tile_id
    return Session(world=world)


def _assert_unchanged(session: Session, before_hash: str, before_screen: object) -> None:
    assert world_hash(session.world) == before_hash
    assert session.screen == before_screen


def test_move_from_hub_into_region_opens_tile_detail() -> None:
    session = _session()

    outcome = session.attempt_move("greenbelt-nw")

    assert outcome == Moved(tile_id="greenbelt-nw", directive=OpenTileDetail(tile_id="greenbelt-nw"))
    assert session.party_tile_id == "greenbelt-nw"
    assert session.screen == TileDetailScreen(tile_id="greenbelt-nw")


def test_adjacent_move_between_two_peripheral_regions_is_cross_region() -> None:
    session = _session(party_tile_id="greenbelt-nw")
    before_hash, before_screen = world_hash(session.world), session.screen

    outcome = session.attempt_move("pitax")

    assert outcome == Invalid(reason=INVALID_CROSS_REGION)
    _assert_unchanged(session, before_hash, before_screen)


def test_every_adjacent_peripheral_pair_in_different_regions_is_blocked() -> None:
    blocked = [("greenbelt-ne", "brevoy"), ("brevoy", "tuskwater-se"), ("tuskwater-sw", "pitax")]
    for origin, destination in blocked:
        session = _session(party_tile_id=origin)
        assert session.attempt_move(destination) == Invalid(reason=INVALID_CROSS_REGION)
        assert session.party_tile_id == origin


def test_same_region_neighbors_can_move_directly() -> None:
    session = _session(party_tile_id="greenbelt-nw")

    outcome = session.attempt_move("greenbelt-ne")

    assert isinstance(outcome, Moved)
    assert session.party_tile_id == "greenbelt-ne"


def test_self_move_is_inert() -> None:
    session = _session()
    before_hash, before_screen = world_hash(session.world), session.screen

    assert session.attempt_move("capital") == NoOp()
    _assert_unchanged(session, before_hash, before_screen)


def test_unknown_destination_is_invalid_without_side_effects() -> None:
    session = _session()
    before_hash, before_screen = world_hash(session.world), session.screen

    assert session.attempt_move("atlantis") == Invalid(reason=INVALID_UNKNOWN_TILE)
    _assert_unchanged(session, before_hash, before_screen)


def test_unknown_origin_is_invalid() -> None:
    session = _session()

    assert session.attempt_move("pitax", from_tile_id="atlantis") == Invalid(reason=INVALID_UNKNOWN_TILE)
    assert session.party_tile_id == "capital"


def test_non_adjacent_destination_is_rejected() -> None:
    session = _session(party_tile_id="greenbelt-nw")
    before_hash, before_screen = world_hash(session.world), session.screen

    assert session.attempt_move("tuskwater-se") == Invalid(reason=INVALID_NOT_ADJACENT)
    _assert_unchanged(session, before_hash, before_screen)


def test_adjacency_is_checked_before_region_rule() -> None:
    # brevoy (1,0) and pitax (-1,0) are two steps apart and in different regions
    session = _session(party_tile_id="brevoy")

    assert session.attempt_move("pitax") == Invalid(reason=INVALID_NOT_ADJACENT)


def test_landing_on_capital_always_stays_on_global_view() -> None:
    for origin in ("greenbelt-nw", "greenbelt-ne", "brevoy", "tuskwater-se", "tuskwater-sw", "pitax"):
        session = _session()
        session.attempt_move(origin)
        assert session.screen == TileDetailScreen(tile_id=origin)

        outcome = session.attempt_move("capital")

        assert outcome == Moved(tile_id="capital", directive=StayOnGlobalView())
        assert session.screen == GlobalScreen()
        assert session.party_tile_id == "capital"


def test_move_marks_destination_discovered_under_fog_of_war() -> None:
    session = _session(FOG_OF_WAR_MAP_PATH)
    assert session.world.tiles["southern-marsh"].discovered is False

    session.attempt_move("southern-marsh")

    assert session.world.tiles["southern-marsh"].discovered is True
    undiscovered = [tile.tile_id for tile in session.world.tiles.values() if not tile.discovered]
    assert "southern-marsh" not in undiscovered
    assert len(undiscovered) == 5


def test_single_region_map_allows_ring_moves() -> None:
    session = _session(FOG_OF_WAR_MAP_PATH)
    session.attempt_move("western-plains")

    assert isinstance(session.attempt_move("southern-marsh"), Moved)
    assert isinstance(session.attempt_move("southeastern-river"), Moved)


def test_discovery_never_reverts_after_leaving_tile() -> None:
    session = _session(FOG_OF_WAR_MAP_PATH)
    session.attempt_move("northern-forest")
    session.attempt_move("capital")

    assert session.world.tiles["northern-forest"].discovered is True


def test_check_move_has_no_side_effects() -> None:
    session = _session(FOG_OF_WAR_MAP_PATH)
    before_hash = world_hash(session.world)

    assert session.check_move("capital", "eastern-mountains") is None
    assert world_hash(session.world) == before_hash
    assert session.event_trace == []


def test_explicit_origin_matching_party_tile_moves() -> None:
    session = _session(party_tile_id="greenbelt-nw")

    outcome = session.attempt_move("greenbelt-ne", from_tile_id="greenbelt-nw")

    assert isinstance(outcome, Moved)
    assert session.party_tile_id == "greenbelt-ne"


def test_origin_other_than_party_tile_is_rejected() -> None:
    session = _session(party_tile_id="pitax")
    before_hash, before_screen = world_hash(session.world), session.screen

    outcome = session.apply_command(
        SessionCommand("move", {"to_tile_id": "brevoy", "from_tile_id": "capital"})
    )

    assert outcome == Invalid(reason=INVALID_STALE_ORIGIN)
    assert session.party_tile_id == "pitax"
    _assert_unchanged(session, before_hash, before_screen)


def test_party_only_ever_steps_to_an_adjacent_tile() -> None:
    tile_ids = list(load_world_json(DEFAULT_MAP_PATH).tiles)
    for start in tile_ids:
        for origin in tile_ids:
            for destination in tile_ids:
                session = _session(party_tile_id=start)
                start_coord = session.world.tiles[start].coord

                outcome = session.attempt_move(destination, from_tile_id=origin)

                if isinstance(outcome, Moved):
                    assert is_adjacent(start_coord, session.world.party_tile().coord)
                else:
                    assert session.party_tile_id == start


def test_legal_destinations_from_hub_and_spoke() -> None:
    assert _session().legal_destinations() == (
        "greenbelt-nw",
        "greenbelt-ne",
        "brevoy",
        "tuskwater-se",
        "tuskwater-sw",
        "pitax",
    )
    assert _session(party_tile_id="greenbelt-nw").legal_destinations() == ("capital", "greenbelt-ne")
    assert _session(party_tile_id="pitax").legal_destinations() == ("capital",)


def test_hub_region_tiles_connect_to_every_region() -> None:
    regions = {
        "Hub": RegionDef(region_id="Hub", name="Hub", hub=True),
        "North": RegionDef(region_id="North", name="North"),
        "West": RegionDef(region_id="West", name="West"),
    }
    tiles = [
        TileRecord(tile_id="capital", name="C", coord=HexCoord(0, 0), region="Hub", kind="capital"),
        TileRecord(tile_id="road", name="Road", coord=HexCoord(0, -1), region="Hub"),
        TileRecord(tile_id="north", name="North", coord=HexCoord(0, -2), region="North"),
        TileRecord(tile_id="west", name="West", coord=HexCoord(-1, -1), region="West"),
    ]
    world = WorldState(tiles={tile.tile_id: tile for tile in tiles}, regions=regions, party_tile_id="road")
    session = Session(world=world)

    assert session.check_move("road", "north") is None
    assert session.check_move("road", "west") is None
    assert session.check_move("north", "west") == Invalid(reason=INVALID_CROSS_REGION)
    assert isinstance(session.attempt_move("north"), Moved)
    assert session.screen == TileDetailScreen(tile_id="north")
