"""Shared source-tree fixtures for registry tests."""

import json
from pathlib import Path

from canopy_registry.config import RegistryConfig

FIXED_TIMESTAMP = "2024-01-01T00:00:00.000Z"

BUTTON_SOURCE = """\
import React from 'react';
import { Pressable, Text } from 'react-native';
import { ChevronRight } from 'lucide-react-native';
import * as Haptics from 'expo-haptics';
import { useTheme } from '../../providers/ThemeProvider';
import { useHaptics } from '../../providers/HapticsProvider';
import { colors, spacing } from '../../constants/ui';

export type ButtonVariant = 'solid' | 'outline' | 'ghost';
export type ButtonSize = 'sm' | 'md' | 'lg';

export interface ButtonProps {
  variant?: ButtonVariant;
  size?: ButtonSize;
}

export function Button({ variant = 'solid', size = 'md' }: ButtonProps) {
  const theme = useTheme();
  const { triggerHaptic } = useHaptics();
  return (
    <Pressable style={{ padding: spacing.md, backgroundColor: colors.primary[500] }}>
      <ChevronRight />
    </Pressable>
  );
}
"""

CARD_SOURCE = """\
import { View } from 'react-native';
import { useTheme } from '../../providers/ThemeProvider';
import { radii, shadows } from '../../constants/ui';

export interface CardProps {
  elevated?: boolean;
}

export const Card = ({ elevated }: CardProps) => {
  const { colors } = useTheme();
  return <View style={{ borderRadius: radii.lg, ...shadows.md, backgroundColor: colors.surface }} />;
};
"""

BADGE_SOURCE = """\
import { Text } from "react-native";

type BadgeVariant = "info" | "success" | "warning";

export function Badge({ variant }: { variant: BadgeVariant }) {
  return <Text>{variant}</Text>;
}
"""

THEME_PROVIDER_SOURCE = """\
import React, { createContext, useContext } from 'react';
import { colors } from '../constants/ui';

export const ThemeContext = createContext({ colors });

export function ThemeProvider({ children }) {
  return <ThemeContext.Provider value={{ colors }}>{children}</ThemeContext.Provider>;
}

export function useTheme() {
  return useContext(ThemeContext);
}
"""

HAPTICS_PROVIDER_SOURCE = """\
import React, { createContext } from 'react';
import * as Haptics from 'expo-haptics';

export const HapticsContext = createContext(null);

export function HapticsProvider({ children }) {
  return <HapticsContext.Provider value={Haptics}>{children}</HapticsContext.Provider>;
}
"""

COLORS_SOURCE = """\
export const colors = {
  primary: { 500: '#2f855a' },
  surface: '#ffffff',
} as const;
"""

SPACING_SOURCE = """\
export const spacing = { sm: 4, md: 8, lg: 16 } as const;
"""

CANOPY_TEMPLATE = {
    "name": "canopy",
    "displayName": "Canopy",
    "description": "Forest greens with relaxed spacing",
    "author": "Registry Team",
    "version": "1.0.0",
    "personality": {"mood": "calm", "spacing": "comfortable", "roundness": "rounded"},
    "preview": {"primary": "#2f855a"},
    "tokens": {
        "colors": {"primary": {"500": "#2f855a"}, "surface": "#ffffff"},
        "spacing": {"sm": 4, "md": 8},
    },
}

DUSK_TEMPLATE = {
    "name": "dusk",
    "displayName": "Dusk",
    "description": "Dark purple evening theme",
    "author": "Registry Team",
    "version": "1.0.0",
    "personality": {"mood": "calm", "spacing": "compact", "roundness": "sharp"},
    "tokens": {"colors": {"primary": {"500": "#553c9a"}}},
}


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def write_template(registry_root: Path, name: str, data) -> Path:
    return write(registry_root / "templates" / name / "template.json", json.dumps(data, indent=2))


def make_project(root: Path, with_templates: bool = True) -> RegistryConfig:
    """Create a source project and an empty registry under ``root``."""
    app = root / "app"
    write(app / "components/ui/Button.tsx", BUTTON_SOURCE)
    write(app / "components/ui/Card.tsx", CARD_SOURCE)
    write(app / "components/ui/Badge.tsx", BADGE_SOURCE)
    write(app / "components/ui/index.tsx", "export * from './Button';\n")
    write(app / "providers/ThemeProvider.tsx", THEME_PROVIDER_SOURCE)
    write(app / "providers/HapticsProvider.tsx", HAPTICS_PROVIDER_SOURCE)
    write(app / "constants/ui/colors.ts", COLORS_SOURCE)
    write(app / "constants/ui/spacing.ts", SPACING_SOURCE)
    write(app / "constants/ui/index.ts", "export * from './colors';\n")

    registry = root / "registry"
    registry.mkdir()
    if with_templates:
        write_template(registry, "canopy", CANOPY_TEMPLATE)
        write_template(registry, "dusk", DUSK_TEMPLATE)

    return RegistryConfig(registry_root=registry, source_root=app)
