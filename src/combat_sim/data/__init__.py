# Item models, loadouts and bundled data loaders
