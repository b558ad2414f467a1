"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Model Bar - Picker + Refresh
   ============================================ */
#model-bar {
    height: auto;
    padding: 0 1;
    background: $panel;
    border-bottom: solid $border;

    #model-select {
        width: 1fr;
    }

    #refresh-btn {
        min-width: 12;
        margin-left: 1;
    }
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

#welcome {
    width: 100%;
    padding: 2 4;
    text-align: center;
    color: $text-muted;
}

#typing-indicator {
    padding: 0 2;
    color: $secondary;
    text-style: italic;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;

    &.user-message {
        border-left: thick $primary;
        background: $primary 8%;
    }

    &.assistant-message {
        border-left: thick $secondary;
        background: $surface;
    }

    &:hover {
        background: $boost;
    }
}

.message-header {
    color: $text-muted;
    text-style: bold;
}

.message-content {
    height: auto;
    padding: 0 0 1 0;
}

.thinking {
    border: none;
    padding: 0;
    margin: 0 0 1 0;
    background: transparent;

    CollapsibleTitle {
        color: $accent;
    }
}

.thinking-content {
    color: $text-muted;
    padding: 0 2;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-x: auto;
}

/* ============================================
   Chat Input Bar - Text Entry + Send/Stop
   ============================================ */
ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }

    Button {
        height: 100%;
        min-width: 10;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:focus {
        background: transparent;
    }

    &:disabled {
        opacity: 60%;
    }
}
"""
