"""Flask JSON adapter around kanatype.Trainer."""
