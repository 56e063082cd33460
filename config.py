from __future__ import annotations

from dataclasses import dataclass, replace

import settings as cfg


@dataclass(frozen=True)
class Config:
    # Window
    width: int
    height: int
    fps: int

    # Network generation
    node_count: int
    min_connections: int
    max_connections: int
    network_width: float
    network_height: float
    min_node_distance: float
    edge_distance_mult: float
    edge_angle_penalty: float
    edge_crowded_deg: float
    placement_padding: float
    placement_attempts: int
    placement_jitter: float

    # Relaxation
    force_iterations: int
    force_repulsion: float
    force_attraction: float
    force_damping: float
    force_min_movement: float
    separation_passes: int
    separation_epsilon: float

    # Simplified network
    main_path_hops: int
    path_spacing: float
    sphere_radius: float
    decorative_node_count: int
    inner_node_count: int
    decorative_min_distance: float
    decorative_attempts: int
    decorative_edge_count: int
    decorative_edge_min_distance: float
    decorative_edge_max_distance: float

    # Vision
    vision_radius: int

    # Pursuer
    pursuer_base_speed: float
    pursuer_speed_ramp: float
    pursuer_max_speed: float
    pursuer_hack_sec: float
    pursuer_pushback_hops: int
    pursuer_reset_speed_decay: float
    show_pursuer_path: bool

    # Puzzles
    puzzle_grid_sizes: dict[int, int]
    puzzle_checkpoints: dict[int, int]
    puzzle_must_fill_all: bool
    puzzle_attempts: int
    puzzle_step_budget: int

    # Resources
    initial_resources: int
    max_resources: int
    block_cost: int
    firewall_base_reward: int
    firewall_round_multiplier: int

    # Rounds
    max_rounds: int

    # Colors
    background_color: tuple[int, int, int]
    fog_color: tuple[int, int, int]
    text_color: tuple[int, int, int]
    node_normal_color: tuple[int, int, int]
    node_activated_color: tuple[int, int, int]
    node_entry_color: tuple[int, int, int]
    node_core_color: tuple[int, int, int]
    node_blocked_color: tuple[int, int, int]
    edge_dormant_color: tuple[int, int, int]
    edge_active_color: tuple[int, int, int]
    edge_solving_color: tuple[int, int, int]
    edge_blocked_color: tuple[int, int, int]
    edge_pursuer_color: tuple[int, int, int]
    edge_failed_color: tuple[int, int, int]
    pursuer_color: tuple[int, int, int]
    explorer_color: tuple[int, int, int]
    node_radius: int
    core_radius: int


def validate_config(config: Config) -> Config:
    if config.min_connections < 1:
        raise ValueError("min_connections must be >= 1")
    if config.min_connections > config.max_connections:
        raise ValueError(
            f"min_connections ({config.min_connections}) > max_connections ({config.max_connections})"
        )
    if config.node_count < 2:
        raise ValueError("node_count must be >= 2")
    if config.main_path_hops < 1:
        raise ValueError("main_path_hops must be >= 1")
    if config.vision_radius < 0:
        raise ValueError("vision_radius must be >= 0")
    if config.pursuer_max_speed <= 0.0 or config.pursuer_base_speed <= 0.0:
        raise ValueError("pursuer speeds must be positive")
    for tier, size in config.puzzle_grid_sizes.items():
        count = config.puzzle_checkpoints.get(tier)
        if count is None or count < 2 or count > size * size:
            raise ValueError(f"puzzle tier {tier}: bad checkpoint count {count} for a {size}x{size} grid")
    return config


def load_config(**overrides) -> Config:
    config = Config(
        # Window
        width=cfg.WIDTH,
        height=cfg.HEIGHT,
        fps=cfg.FPS,

        # Network generation
        node_count=cfg.NODE_COUNT,
        min_connections=cfg.MIN_CONNECTIONS,
        max_connections=cfg.MAX_CONNECTIONS,
        network_width=cfg.NETWORK_WIDTH,
        network_height=cfg.NETWORK_HEIGHT,
        min_node_distance=cfg.MIN_NODE_DISTANCE,
        edge_distance_mult=cfg.EDGE_DISTANCE_MULT,
        edge_angle_penalty=cfg.EDGE_ANGLE_PENALTY,
        edge_crowded_deg=cfg.EDGE_CROWDED_DEG,
        placement_padding=cfg.PLACEMENT_PADDING,
        placement_attempts=cfg.PLACEMENT_ATTEMPTS,
        placement_jitter=cfg.PLACEMENT_JITTER,

        # Relaxation
        force_iterations=cfg.FORCE_ITERATIONS,
        force_repulsion=cfg.FORCE_REPULSION,
        force_attraction=cfg.FORCE_ATTRACTION,
        force_damping=cfg.FORCE_DAMPING,
        force_min_movement=cfg.FORCE_MIN_MOVEMENT,
        separation_passes=cfg.SEPARATION_PASSES,
        separation_epsilon=cfg.SEPARATION_EPSILON,

        # Simplified network
        main_path_hops=cfg.MAIN_PATH_HOPS,
        path_spacing=cfg.PATH_SPACING,
        sphere_radius=cfg.SPHERE_RADIUS,
        decorative_node_count=cfg.DECORATIVE_NODE_COUNT,
        inner_node_count=cfg.INNER_NODE_COUNT,
        decorative_min_distance=cfg.DECORATIVE_MIN_DISTANCE,
        decorative_attempts=cfg.DECORATIVE_ATTEMPTS,
        decorative_edge_count=cfg.DECORATIVE_EDGE_COUNT,
        decorative_edge_min_distance=cfg.DECORATIVE_EDGE_MIN_DISTANCE,
        decorative_edge_max_distance=cfg.DECORATIVE_EDGE_MAX_DISTANCE,

        # Vision
        vision_radius=cfg.EXPLORER_VISION_RADIUS,

        # Pursuer
        pursuer_base_speed=cfg.PURSUER_BASE_SPEED,
        pursuer_speed_ramp=cfg.PURSUER_SPEED_RAMP,
        pursuer_max_speed=cfg.PURSUER_MAX_SPEED,
        pursuer_hack_sec=cfg.PURSUER_HACK_SEC,
        pursuer_pushback_hops=cfg.PURSUER_PUSHBACK_HOPS,
        pursuer_reset_speed_decay=cfg.PURSUER_RESET_SPEED_DECAY,
        show_pursuer_path=cfg.SHOW_PURSUER_PATH,

        # Puzzles
        puzzle_grid_sizes=dict(cfg.PUZZLE_GRID_SIZES),
        puzzle_checkpoints=dict(cfg.PUZZLE_CHECKPOINTS),
        puzzle_must_fill_all=cfg.PUZZLE_MUST_FILL_ALL,
        puzzle_attempts=cfg.PUZZLE_ATTEMPTS,
        puzzle_step_budget=cfg.PUZZLE_STEP_BUDGET,

        # Resources
        initial_resources=cfg.INITIAL_RESOURCES,
        max_resources=cfg.MAX_RESOURCES,
        block_cost=cfg.BLOCK_COST,
        firewall_base_reward=cfg.FIREWALL_BASE_REWARD,
        firewall_round_multiplier=cfg.FIREWALL_ROUND_MULTIPLIER,

        # Rounds
        max_rounds=cfg.MAX_ROUNDS,

        # Colors
        background_color=cfg.BACKGROUND_COLOR,
        fog_color=cfg.FOG_COLOR,
        text_color=cfg.TEXT_COLOR,
        node_normal_color=cfg.NODE_NORMAL_COLOR,
        node_activated_color=cfg.NODE_ACTIVATED_COLOR,
        node_entry_color=cfg.NODE_ENTRY_COLOR,
        node_core_color=cfg.NODE_CORE_COLOR,
        node_blocked_color=cfg.NODE_BLOCKED_COLOR,
        edge_dormant_color=cfg.EDGE_DORMANT_COLOR,
        edge_active_color=cfg.EDGE_ACTIVE_COLOR,
        edge_solving_color=cfg.EDGE_SOLVING_COLOR,
        edge_blocked_color=cfg.EDGE_BLOCKED_COLOR,
        edge_pursuer_color=cfg.EDGE_PURSUER_COLOR,
        edge_failed_color=cfg.EDGE_FAILED_COLOR,
        pursuer_color=cfg.PURSUER_COLOR,
        explorer_color=cfg.EXPLORER_COLOR,
        node_radius=cfg.NODE_RADIUS,
        core_radius=cfg.CORE_RADIUS,
    )
    if overrides:
        config = replace(config, **overrides)
    return validate_config(config)
